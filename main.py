# NOTE: For displaying the decoded image in a GUI,
#       please download PyQt5.
#
# Installation (in terminal):
#   pip install PyQt5
import sys
from PyQt5.QtWidgets import (
    QApplication, QWidget, QVBoxLayout, QPushButton, QLabel,
    QFileDialog, QTextEdit, QSlider, QHBoxLayout, QCheckBox
)
from PyQt5.QtGui import QPixmap
from PyQt5.QtCore import Qt

import bmp_codec
from config import settings
from errors import BmpError
from logger import logger
from utils import adjust, format_metadata, to_qimage


class BMPViewer(QWidget):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("BMP Viewer")
        self.resize(settings.window_width, settings.window_height + 100)

        # Decoded image, never modified by the display settings
        self.image = None

        # RGB channels toggle and display settings
        self.r_enabled = True
        self.g_enabled = True
        self.b_enabled = True
        self.brightness = settings.default_brightness / 100.0
        self.scale = 1.0

        layout = QVBoxLayout()

        top_layout = QHBoxLayout()

        # Button to open BMP file
        self.open_button = QPushButton("Open BMP File")
        self.open_button.setFixedSize(150, 50)
        self.open_button.clicked.connect(self.open_file)
        top_layout.addWidget(self.open_button)

        # Button to save the adjusted image as a new BMP file
        self.save_button = QPushButton("Save BMP File")
        self.save_button.setFixedSize(150, 50)
        self.save_button.clicked.connect(self.save_file)
        top_layout.addWidget(self.save_button)

        top_layout.addStretch()

        # Checkboxes to enable/disable R, G, B channels
        self.r_button = QCheckBox("R")
        self.g_button = QCheckBox("G")
        self.b_button = QCheckBox("B")

        self.r_button.clicked.connect(self.toggle_r)
        self.g_button.clicked.connect(self.toggle_g)
        self.b_button.clicked.connect(self.toggle_b)

        for btn in (self.r_button, self.g_button, self.b_button):
            btn.setChecked(True)
            btn.setFixedSize(30, 30)
            top_layout.addWidget(btn)

        layout.addLayout(top_layout)

        # Label to display the image
        self.image_label = QLabel("No Image Loaded")
        self.image_label.setStyleSheet("border: 1px solid black; background: white;")
        self.image_label.setAlignment(Qt.AlignCenter)
        self.image_label.setFixedSize(settings.window_width, settings.window_height)
        layout.addWidget(self.image_label)

        # Text box to display BMP metadata and errors
        self.metadata_box = QTextEdit("No Metadata Loaded")
        self.metadata_box.setMinimumHeight(150)
        self.metadata_box.setReadOnly(True)
        layout.addWidget(self.metadata_box)

        # Slider for brightness adjustment
        self.brightness_slider = QSlider(Qt.Horizontal)
        self.brightness_slider.setRange(0, 200)
        self.brightness_slider.setValue(settings.default_brightness)
        self.brightness_slider.valueChanged.connect(self.update_image)
        layout.addWidget(QLabel("Brightness"))
        layout.addWidget(self.brightness_slider)

        # Slider for scaling the image
        self.scale_slider = QSlider(Qt.Horizontal)
        self.scale_slider.setRange(1, 100)
        self.scale_slider.setValue(100)
        self.scale_slider.valueChanged.connect(self.update_image)
        layout.addWidget(QLabel("Scale"))
        layout.addWidget(self.scale_slider)

        self.setLayout(layout)

    # Open BMP file and decode it
    def open_file(self):
        filepath, _ = QFileDialog.getOpenFileName(self, "Open BMP File", "", "BMP Files (*.bmp)")
        if not filepath:
            return

        try:
            with open(filepath, "rb") as f:
                header = bmp_codec.read_header(f)
                f.seek(0)
                image = bmp_codec.read_bmp(f)
        except (BmpError, OSError) as e:
            logger.error("Could not open %s: %s", filepath, e)
            self.metadata_box.setText(f"Could not open {filepath}:\n{e}")
            return

        # Display metadata
        self.metadata_box.setText(format_metadata(header))

        self.image = image
        self.update_image()

    # Save the image as currently displayed (channels and brightness applied)
    def save_file(self):
        if self.image is None:
            return

        output_filepath, _ = QFileDialog.getSaveFileName(self, "Save BMP File", "", "BMP Files (*.bmp)")
        if not output_filepath:
            return

        try:
            bmp_codec.save(self.current_adjusted(), output_filepath)
        except BmpError as e:
            logger.error("Could not save %s: %s", output_filepath, e)
            self.metadata_box.append(f"Could not save {output_filepath}: {e}")
            return

        self.metadata_box.append(f"Saved to {output_filepath}")

    def current_adjusted(self):
        return adjust(self.image, self.brightness, (self.r_enabled, self.g_enabled, self.b_enabled))

    # Update image display based on settings
    def update_image(self):
        if self.image is None:
            return

        self.brightness = self.brightness_slider.value() / 100.0
        self.scale = self.scale_slider.value() / 100.0

        # Show updated image
        pixmap = QPixmap.fromImage(to_qimage(self.current_adjusted(), self.scale))
        self.image_label.setPixmap(pixmap)

    # Toggle R channel
    def toggle_r(self):
        self.r_enabled = self.r_button.isChecked()
        self.update_image()

    # Toggle G channel
    def toggle_g(self):
        self.g_enabled = self.g_button.isChecked()
        self.update_image()

    # Toggle B channel
    def toggle_b(self):
        self.b_enabled = self.b_button.isChecked()
        self.update_image()


if __name__ == "__main__":
    app = QApplication(sys.argv)
    viewer = BMPViewer()
    viewer.show()
    sys.exit(app.exec_())
