# app.py
import logging
import sys

from dotenv import load_dotenv
from PySide6.QtWidgets import QApplication

from gateway_client import GatewayClient
from logger import setup_logging
from settings import SettingsManager, log_file, log_level
from ui_main_window import MainWindow

logger = logging.getLogger(__name__)


def main() -> None:
    load_dotenv()
    setup_logging(log_level(), log_file() or None)

    app = QApplication(sys.argv)

    settings = SettingsManager()
    client = GatewayClient()
    logger.info("Dashboard conectado a %s", client.base_url)

    window = MainWindow(client=client, settings=settings)
    window.resize(1100, 800)
    window.show()

    exit_code = app.exec()

    settings.save()
    client.session.close()

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
