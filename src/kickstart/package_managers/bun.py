"""Bun package manager definition."""

from kickstart.package_managers.base import PackageManager

BUN = PackageManager(
    name="bun",
    cli_command="bun",
    install_info="https://bun.sh/docs/installation",
    lockfiles=("bun.lockb", "bun.lock"),
    install_args=("install",),
    add_args=("add",),
    run_prefix=("bun", "run"),
)
