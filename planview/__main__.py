import argparse
import sys
from pathlib import Path
from typing import List, Optional

from PySide6.QtGui import QGuiApplication, Qt
from PySide6.QtWidgets import QApplication, QMessageBox
from qt_material import apply_stylesheet

from planview.app.config import apply_env_overrides, load_settings
from planview.app.io import MetadataLoadError, load_metadata
from planview.app.logging_utils import configure_logging
from planview.app.ui_main import MainWindow


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="planview", description="Browse construction drawings by discipline and revision."
    )
    parser.add_argument("--data-dir", type=Path, help="directory holding metadata.json and drawings/")
    parser.add_argument("--settings", type=Path, help="JSON settings file")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = apply_env_overrides(load_settings(args.settings))
    if args.data_dir is not None:
        settings.data_dir = args.data_dir
    if args.debug:
        settings.debug = True
    logger = configure_logging(settings.debug, settings.log_retention)
    logger.info("Starting planview with data directory %s", settings.data_dir)

    app = QApplication(sys.argv[:1])
    QGuiApplication.styleHints().setColorScheme(Qt.ColorScheme.Light)
    apply_stylesheet(app, theme="light_blue.xml", invert_secondary=True)

    try:
        metadata = load_metadata(settings.metadata_path)
    except MetadataLoadError as e:
        logger.error("Could not load metadata: %s", e)
        QMessageBox.critical(None, "planview", f"메타데이터를 불러오지 못했습니다.\n{e}")
        return 1

    window = MainWindow(settings, metadata)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
