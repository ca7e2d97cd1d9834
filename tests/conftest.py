import os

import numpy as np
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6 import QtWidgets  # noqa: E402

from gizmo3d.core import Camera, SceneNode  # noqa: E402


@pytest.fixture(scope="session")
def qapp() -> QtWidgets.QApplication:
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    return app


@pytest.fixture
def ortho_camera() -> Camera:
    # 60 px per world unit; the world origin lands on (400, 300).
    return Camera.orthographic((0.0, 0.0, 10.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0), height=10.0)


@pytest.fixture
def node() -> SceneNode:
    return SceneNode("box", position=np.zeros(3))
