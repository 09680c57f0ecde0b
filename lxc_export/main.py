import argparse
import sys
from pathlib import Path

from lxc_export.__version__ import __version__
from lxc_export.config.settings import load_config
from lxc_export.domain import StepAction
from lxc_export.exceptions import ConfigurationError
from lxc_export.logging import setup_logging
from lxc_export.steps import ConsoleUi, StateBag, StepExport

EXIT_OK = 0
EXIT_HALTED = 1
EXIT_CONFIG_ERROR = 2


def build_parser():
    parser = argparse.ArgumentParser(
        prog="lxc-export",
        description="Export an LXC container rootfs with its idmap preserved",
    )
    parser.add_argument("-n", "--name", dest="container_name", help="Container name")
    parser.add_argument(
        "-o", "--output-dir", help="Directory for rootfs.tar.gz and lxc-config"
    )
    parser.add_argument(
        "-c",
        "--config-file",
        help="Container config file (defaults to <container dir>/config)",
    )
    parser.add_argument("--settings", type=Path, help="JSON settings file")
    parser.add_argument("--log-dir", type=Path, help="Directory for log files")
    parser.add_argument("-d", "--debug", action="store_true", help="Enable verbose debug output")
    parser.add_argument("--trace", action="store_true", help="Also log command output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    ui = ConsoleUi()
    try:
        config = load_config(
            settings_path=args.settings,
            overrides={
                "container_name": args.container_name,
                "output_dir": args.output_dir,
                "config_file": args.config_file,
            },
        )
    except ConfigurationError as error:
        ui.error(str(error))
        return EXIT_CONFIG_ERROR

    setup_logging(debug=args.debug, trace=args.trace, log_dir=args.log_dir)

    try:
        config.output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        ui.error(f"Error creating output directory {config.output_dir}: {error}")
        return EXIT_HALTED

    state = StateBag()
    state.put("config", config)
    state.put("ui", ui)

    step = StepExport()
    try:
        action = step.run(state)
    finally:
        step.cleanup(state)
    return EXIT_OK if action is StepAction.CONTINUE else EXIT_HALTED


if __name__ == "__main__":
    sys.exit(main())
