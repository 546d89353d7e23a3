"""pnpm package manager definition."""

from kickstart.package_managers.base import PackageManager

PNPM = PackageManager(
    name="pnpm",
    cli_command="pnpm",
    install_info="https://pnpm.io/installation",
    lockfiles=("pnpm-lock.yaml",),
    install_args=("install",),
    add_args=("add",),
    run_prefix=("pnpm",),
)
