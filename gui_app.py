import sys
from typing import List

import cv2
from PySide6 import QtCore, QtGui, QtWidgets

from app import CAMERA_UNAVAILABLE_MESSAGE, MODEL_UNAVAILABLE_MESSAGE, analyse_frame, build_coach, build_detector_loader
from camera import CameraStream
from config import AppConfig, config_from_args, configure_logging
from speech import SpeechEngine
from ui import check_lines
from visualization import draw_pose


class PracticePage(QtWidgets.QWidget):
    def __init__(self, config: AppConfig, parent=None):
        super().__init__(parent)
        self.config = config
        self._setup_ui()
        self._setup_runtime()

    def _setup_ui(self):
        self.setObjectName("PracticePage")
        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(16)

        self.video_label = QtWidgets.QLabel("Camera feed")
        self.video_label.setAlignment(QtCore.Qt.AlignCenter)
        self.video_label.setMinimumSize(720, 480)
        self.video_label.setStyleSheet("background:#101214; border-radius:12px;")

        right_panel = QtWidgets.QVBoxLayout()
        right_panel.setSpacing(12)

        self.feedback_box = QtWidgets.QFrame()
        self.feedback_box.setMinimumWidth(300)
        self.feedback_box.setStyleSheet(
            "QFrame{background:#15181b;border:1px solid #2b2f33;border-radius:10px;color:#e6e6e6;}"
        )
        feedback_layout = QtWidgets.QVBoxLayout(self.feedback_box)
        feedback_layout.setContentsMargins(12, 12, 12, 12)
        feedback_layout.setSpacing(8)

        self.feedback_label = QtWidgets.QLabel("Get into child's pose facing the camera from the side.")
        self.feedback_label.setWordWrap(True)
        self.feedback_label.setStyleSheet("font-size:15px;")
        self.error_label = QtWidgets.QLabel("")
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet("color:#ff9b9b;font-size:14px;")
        feedback_layout.addWidget(self.feedback_label)
        feedback_layout.addWidget(self.error_label)

        self.check_list = QtWidgets.QListWidget()
        self.check_list.setStyleSheet(
            "QListWidget{background:#15181b;border:1px solid #2b2f33;border-radius:10px;color:#e6e6e6;}"
            "QListWidget::item{padding:6px;}"
        )

        self.sound_btn = QtWidgets.QPushButton()
        self.sound_btn.setStyleSheet(
            "QPushButton{background:#1f6f5f;color:white;padding:10px 20px;border-radius:10px;font-size:14px;}"
            "QPushButton:hover{background:#249b84;}"
        )
        self.sound_btn.clicked.connect(self._toggle_sound)

        right_panel.addWidget(QtWidgets.QLabel("Feedback"))
        right_panel.addWidget(self.feedback_box)
        right_panel.addWidget(QtWidgets.QLabel("Checks"))
        right_panel.addWidget(self.check_list, 1)
        right_panel.addWidget(self.sound_btn)

        layout.addWidget(self.video_label, 1)
        layout.addLayout(right_panel)

    def _setup_runtime(self):
        self.camera = CameraStream(
            camera_index=self.config.camera_index,
            width=self.config.width,
            height=self.config.height,
            target_fps=self.config.target_fps,
            mirror=self.config.mirror,
        )
        self.detectors = build_detector_loader(self.config)
        self.speech = SpeechEngine(rate=self.config.speech_rate)
        self.coach = build_coach(self.config, self.speech)
        self._update_sound_button()

        self.timer = QtCore.QTimer(self)
        self.timer.timeout.connect(self._update_frame)

    def start(self):
        self.speech.start()
        self.start_camera()
        if not self.timer.isActive():
            self.timer.start(33)

    def start_camera(self) -> bool:
        if self.camera.ensure_open():
            self.error_label.setText("")
            return True
        self.error_label.setText(CAMERA_UNAVAILABLE_MESSAGE)
        return False

    def stop(self):
        self.timer.stop()
        self.camera.release()
        self.detectors.close()
        self.speech.close()
        self.coach.reset()

    def _toggle_sound(self):
        self.coach.throttle.toggle_sound()
        self._update_sound_button()

    def _update_sound_button(self):
        self.sound_btn.setText("Sound: on" if self.coach.throttle.sound_enabled else "Sound: off")

    def _update_frame(self):
        if not self.camera.is_open and not self.start_camera():
            return

        cam_frame = self.camera.read()
        if not cam_frame.ok:
            self.error_label.setText("Camera error")
            return

        frame = cam_frame.frame
        detector = self.detectors.get()
        if detector is None:
            self.error_label.setText(MODEL_UNAVAILABLE_MESSAGE)
        else:
            analysed = analyse_frame(detector, self.coach, frame, cam_frame.timestamp)
            if analysed is not None:
                pose, outcome = analysed
                draw_pose(
                    frame,
                    pose,
                    failing=outcome.failing_landmarks(),
                    visibility_threshold=self.config.draw_visibility,
                )
                self.feedback_label.setText(outcome.feedback_text)
                self._show_checks(check_lines(outcome.check_status))
                self.error_label.setText("")

        frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        h, w, ch = frame_rgb.shape
        image = QtGui.QImage(frame_rgb.data, w, h, ch * w, QtGui.QImage.Format_RGB888)
        pixmap = QtGui.QPixmap.fromImage(image)
        self.video_label.setPixmap(pixmap.scaled(self.video_label.size(), QtCore.Qt.KeepAspectRatio))

    def _show_checks(self, lines: List):
        self.check_list.clear()
        for label, passed in lines:
            item = QtWidgets.QListWidgetItem(("OK  " if passed else "--  ") + label)
            item.setForeground(QtGui.QColor("#7bd88f" if passed else "#ff6b6b"))
            self.check_list.addItem(item)


class HomePage(QtWidgets.QWidget):
    start_clicked = QtCore.Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(20)

        title = QtWidgets.QLabel("Child's Pose Coach")
        title.setStyleSheet("font-size:28px;font-weight:700;color:#f2f2f2;")
        subtitle = QtWidgets.QLabel(
            "Kneel, sit back on your heels and fold forward. Keep your whole body in view, side on to the camera."
        )
        subtitle.setWordWrap(True)
        subtitle.setStyleSheet("font-size:14px;color:#b9c0c5;")

        button = QtWidgets.QPushButton("Start Practice")
        button.setStyleSheet(
            "QPushButton{background:#1f6f5f;color:white;padding:12px 24px;border-radius:10px;font-size:14px;}"
            "QPushButton:hover{background:#249b84;}"
        )
        button.clicked.connect(self.start_clicked.emit)

        layout.addStretch(1)
        layout.addWidget(title)
        layout.addWidget(subtitle)
        layout.addWidget(button)
        layout.addStretch(2)


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, config: AppConfig):
        super().__init__()
        self.setWindowTitle("Child's Pose Coach")
        self.resize(1280, 720)
        self.setStyleSheet("QMainWindow{background:#0f1113;}")

        self.stack = QtWidgets.QStackedWidget()
        self.home_page = HomePage()
        self.practice_page = PracticePage(config)
        self.stack.addWidget(self.home_page)
        self.stack.addWidget(self.practice_page)
        self.setCentralWidget(self.stack)

        self.home_page.start_clicked.connect(self._start_practice)

    def _start_practice(self):
        self.stack.setCurrentIndex(1)
        self.practice_page.start()

    def closeEvent(self, event):
        self.practice_page.stop()
        super().closeEvent(event)


def main():
    config = config_from_args(sys.argv[1:])
    configure_logging(config.log_level)
    app = QtWidgets.QApplication(sys.argv[:1])
    window = MainWindow(config)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
