"""
Tests for the command line entry point.
"""

import json
from pathlib import Path

from pixelart import image_io
from pixelart.app import main
from pixelart.image_processing.utils import count_distinct_colors
from pixelart.models import PixelBuffer


class TestMain:
    def test_pixelates_image(self, tmp_path: Path, noisy_buffer: PixelBuffer) -> None:
        source = tmp_path / "in.png"
        output = tmp_path / "out.png"
        image_io.save(noisy_buffer, source)

        code = main(
            [str(source), str(output), "-s", "4", "-c", "3", "-a", "median-cut",
             "--config", str(tmp_path / "cfg.json")]
        )

        assert code == 0
        result = image_io.load(output)
        assert (result.width, result.height) == (noisy_buffer.width, noisy_buffer.height)
        assert count_distinct_colors(result.to_array()) <= 3

    def test_prompt_mode(self, tmp_path: Path) -> None:
        output = tmp_path / "art.png"
        code = main(
            ["--prompt", "a cat", "--size", "32x32", str(output), "--config", str(tmp_path / "cfg.json")]
        )
        assert code == 0
        assert image_io.load(output).width == 32

    def test_save_config(self, tmp_path: Path, gradient_buffer: PixelBuffer) -> None:
        source = tmp_path / "in.png"
        config_path = tmp_path / "cfg.json"
        image_io.save(gradient_buffer, source)

        main([str(source), str(tmp_path / "out.png"), "-s", "3", "--grid",
              "--config", str(config_path), "--save-config"])

        saved = json.loads(config_path.read_text())
        assert saved["block_size"] == 3
        assert saved["grid_overlay"] is True

    def test_invalid_settings_fail(self, tmp_path: Path, gradient_buffer: PixelBuffer) -> None:
        source = tmp_path / "in.png"
        image_io.save(gradient_buffer, source)
        code = main([str(source), str(tmp_path / "out.png"), "-s", "0",
                     "--config", str(tmp_path / "cfg.json")])
        assert code == 1
        assert not (tmp_path / "out.png").exists()

    def test_missing_input_fails(self, tmp_path: Path) -> None:
        code = main([str(tmp_path / "nope.png"), str(tmp_path / "out.png"),
                     "--config", str(tmp_path / "cfg.json")])
        assert code == 1

    def test_unknown_output_extension_fails(self, tmp_path: Path, gradient_buffer: PixelBuffer) -> None:
        source = tmp_path / "in.png"
        image_io.save(gradient_buffer, source)
        code = main([str(source), str(tmp_path / "out.xyz"),
                     "--config", str(tmp_path / "cfg.json")])
        assert code == 1

    def test_missing_output_directory_fails(self, tmp_path: Path, gradient_buffer: PixelBuffer) -> None:
        source = tmp_path / "in.png"
        image_io.save(gradient_buffer, source)
        code = main([str(source), str(tmp_path / "no_such_dir" / "out.png"),
                     "--config", str(tmp_path / "cfg.json")])
        assert code == 1

    def test_failed_run_does_not_save_config(self, tmp_path: Path, gradient_buffer: PixelBuffer) -> None:
        source = tmp_path / "in.png"
        config_path = tmp_path / "cfg.json"
        image_io.save(gradient_buffer, source)

        code = main([str(source), str(tmp_path / "out.png"), "-s", "0",
                     "--config", str(config_path), "--save-config"])

        assert code == 1
        assert not config_path.exists()

    def test_unsaved_output_does_not_save_config(
        self, tmp_path: Path, gradient_buffer: PixelBuffer
    ) -> None:
        source = tmp_path / "in.png"
        config_path = tmp_path / "cfg.json"
        image_io.save(gradient_buffer, source)

        code = main([str(source), str(tmp_path / "out.xyz"), "-s", "3",
                     "--config", str(config_path), "--save-config"])

        assert code == 1
        assert not config_path.exists()
