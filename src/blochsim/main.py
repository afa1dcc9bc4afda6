"""
Application Initialization
==========================
This module constructs the MVC (Model-View-Controller) architecture and starts
the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Instantiates the Data Model (SimulatorState).
2. Instantiates the Controller (QubitSimulator) with a Qt animation scheduler.
3. Instantiates the Main Window (View) and passes the controller into it.
4. Prevents circular import errors by being the orchestrator.
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QApplication

from blochsim.config import ANIMATION_DURATION_S, APP_ID, ORG_ID, VISIBLE_APP_NAME
from blochsim.controller.simulator import QubitSimulator
from blochsim.logging_config import level_from_env, setup_logging
from blochsim.model.state import SimulatorState
from blochsim.view.clipboard import copy_to_clipboard
from blochsim.view.main_window import MainWindow

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="blochsim", description=VISIBLE_APP_NAME)
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file")
    parser.add_argument(
        "--duration", type=float, default=ANIMATION_DURATION_S,
        help="Gate animation length in seconds (0 disables animation)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    level = logging.DEBUG if args.debug else level_from_env()
    setup_logging(level=level, log_file=args.log_file)

    # 2. Create the Qt Application
    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setApplicationName(APP_ID)
    app = QApplication(sys.argv[:1])
    app.setApplicationDisplayName(VISIBLE_APP_NAME)

    # 3. Initialize the Data Model and the Controller
    state = SimulatorState()
    simulator = QubitSimulator(state, duration=max(0.0, args.duration), clipboard=copy_to_clipboard)

    # 4. Initialize the Main Window, passing the controller
    window = MainWindow(simulator)
    window.show()
    logger.info("Main window shown.")

    # 5. Start Event Loop
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
