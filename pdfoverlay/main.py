import logging
import sys

import qasync
from PyQt5.QtWidgets import QApplication

from .config import ViewerSettings
from .ui import AnnotationViewer
from .utils import configure_logging

logger = logging.getLogger(__name__)


def main():
    """
    Run the annotation viewer.

    Usage: pdfoverlay PDF [OVERLAY_JSON]
    """
    configure_logging()
    app = QApplication(sys.argv)

    loop = qasync.QEventLoop(app)
    settings = ViewerSettings.load()
    settings.device_pixel_ratio = app.devicePixelRatio()

    viewer = AnnotationViewer(settings)
    viewer.setWindowTitle("PDF Overlay")

    args = app.arguments()[1:]
    if args:
        pdf_path = args[0]
        overlay_id = args[1] if len(args) > 1 else None
        if not viewer.load(pdf_path, overlay_id):
            logger.error("Could not open %s", pdf_path)

    viewer.resize(1000, 800)
    viewer.show()
    app.aboutToQuit.connect(viewer.cleanup)

    with loop:
        loop.run_forever()


if __name__ == '__main__':
    main()
