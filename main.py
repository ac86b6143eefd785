import argparse
import asyncio
import logging
import sys

from PyQt6.QtWidgets import QApplication, QMessageBox

try:
    from src.markdownocr.app import MarkdownOCRApp
    from src.markdownocr.config import Config
    from src.markdownocr.core.recognizer import OllamaRecognizer
    from src.markdownocr.core.snapshot import capture
    from src.markdownocr.errors import CaptureError
except ImportError as e:
    print("Error: Could not import the MarkdownOCR application package.")
    print("Please ensure the project structure is correct (e.g., src/markdownocr/app.py exists).")
    print(f"Details: {e}")
    sys.exit(1)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Select a screen region and recognize its text as Markdown with Ollama."
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Print the backend configuration, probe the Ollama service and exit"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    return parser.parse_args(argv)


def check_backend(settings) -> int:
    """Prints the service info and whether the backend answers. Returns an exit code."""
    recognizer = OllamaRecognizer(settings)
    print(recognizer.service_info())
    available = asyncio.run(recognizer.is_backend_available())
    print(f"Service available: {'yes' if available else 'no'}")
    return 0 if available else 1


def main(argv=None):
    """
    The main entry point for MarkdownOCR.

    The screen is captured before any window exists, so the snapshot shows the
    desktop exactly as it was when the program was started.
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        settings = Config().backend_settings()
    except ValueError as e:
        logging.critical(f"Invalid configuration: {e}")
        return 1

    if args.check:
        return check_backend(settings)

    app = QApplication(sys.argv)
    # The overlay closes before the result window opens; quitting is explicit.
    app.setQuitOnLastWindowClosed(False)

    try:
        snapshot = capture()
    except CaptureError as e:
        logging.critical(str(e))
        QMessageBox.critical(None, "MarkdownOCR", str(e))
        return 1

    markdown_ocr = MarkdownOCRApp(app, settings, snapshot)
    markdown_ocr.start()
    return app.exec()


if __name__ == '__main__':
    sys.exit(main())
