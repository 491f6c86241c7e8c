import logging
import sys

from PyQt5.QtWidgets import QApplication

from CS_Libs.GuiLib.color_sorter_window import ColorSorterWindow


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = QApplication(sys.argv)
    window = ColorSorterWindow()
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
