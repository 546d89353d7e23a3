"""npm package manager definition."""

from kickstart.package_managers.base import PackageManager

NPM = PackageManager(
    name="npm",
    cli_command="npm",
    install_info="https://docs.npmjs.com/downloading-and-installing-node-js-and-npm",
    lockfiles=("package-lock.json",),
    install_args=("install",),
    add_args=("install",),
    run_prefix=("npm", "run"),
)
