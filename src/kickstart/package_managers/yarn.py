"""Yarn package manager definition."""

from kickstart.package_managers.base import PackageManager

YARN = PackageManager(
    name="yarn",
    cli_command="yarn",
    install_info="https://yarnpkg.com/getting-started/install",
    lockfiles=("yarn.lock",),
    install_args=(),  # bare `yarn` installs
    add_args=("add",),
    run_prefix=("yarn",),
)
