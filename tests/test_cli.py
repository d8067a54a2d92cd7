"""
Tests for the cardcrop command line
"""

import pytest
import numpy as np
import cv2
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cardcrop.cli import EXIT_NOT_CONVEX, EXIT_OK, main


@pytest.fixture
def card_photo(tmp_path):
    """64x32 PNG with a white left half"""
    img = np.zeros((32, 64, 3), dtype=np.uint8)
    img[:, :32] = 255
    path = tmp_path / "card.png"
    cv2.imwrite(str(path), img)
    return path


class TestCropCommand:
    """Tests for `cardcrop crop`"""

    def test_full_image(self, card_photo, tmp_path):
        output = tmp_path / "out.png"
        code = main(["crop", str(card_photo), "--container", "256x256", "-o", str(output)])

        assert code == EXIT_OK
        assert np.array_equal(cv2.imread(str(output)), cv2.imread(str(card_photo)))

    def test_left_half(self, card_photo, tmp_path):
        output = tmp_path / "left.png"
        code = main([
            "crop", str(card_photo), "--container", "256x256",
            "--tr", "128,64", "--br", "128,192",
            "-o", str(output),
        ])

        result = cv2.imread(str(output))
        assert code == EXIT_OK
        assert result.shape == (32, 32, 3)
        assert np.all(result == 255)

    def test_default_output_name(self, card_photo):
        assert main(["crop", str(card_photo), "--container", "100x100"]) == EXIT_OK
        assert (card_photo.parent / "card_cropped.jpg").exists()

    def test_default_output_uses_configured_format(self, card_photo, tmp_path):
        config_path = tmp_path / "png.yaml"
        config_path.write_text("output:\n  format: .png\n")

        code = main(["crop", str(card_photo), "--container", "100x100", "--config", str(config_path)])

        output = card_photo.parent / "card_cropped.png"
        assert code == EXIT_OK
        assert np.array_equal(cv2.imread(str(output)), cv2.imread(str(card_photo)))

    def test_not_convex(self, card_photo, tmp_path):
        output = tmp_path / "never.png"
        code = main([
            "crop", str(card_photo), "--container", "256x256",
            "--tl", "256,100", "--tr", "0,100",
            "-o", str(output),
        ])

        assert code == EXIT_NOT_CONVEX
        assert not output.exists()

    def test_bad_container(self, card_photo):
        with pytest.raises(SystemExit):
            main(["crop", str(card_photo), "--container", "wide"])
