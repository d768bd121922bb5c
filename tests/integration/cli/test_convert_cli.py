"""End-to-end tests for the pikpix command."""

import io

import pytest
from PIL import Image
from typer.testing import CliRunner

from pikpix.cli.main import app
from pikpix.cli.utils.args import normalize_args
from tests.helpers import requires_heif


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, args):
    return runner.invoke(app, normalize_args([str(arg) for arg in args]))


class TestConvertCli:
    """Test suite for full CLI runs on real files."""

    def test_convert_resize_and_compress(self, runner, sample_png, temp_dir):
        output = temp_dir / "out" / "photo.jpeg"

        result = invoke(
            runner, ["-i", sample_png, "-o", output, "-f", "jpeg", "-c", 80, "-r", "300x200"]
        )

        assert result.exit_code == 0, result.output
        assert f"Converted {sample_png} to {output} as jpeg" in result.output
        with Image.open(output) as image:
            assert image.format == "JPEG"
            assert image.size == (300, 200)

    def test_preserve_aspect_ratio(self, runner, temp_dir, image_generator):
        source = temp_dir / "wide.png"
        source.write_bytes(image_generator(width=400, height=100))
        output = temp_dir / "wide_small.png"

        result = invoke(
            runner,
            ["-i", source, "-o", output, "-f", "png", "-r", "100x100", "--preserve-aspect-ratio"],
        )

        assert result.exit_code == 0, result.output
        with Image.open(output) as image:
            assert image.size == (100, 25)

    def test_existing_output_is_not_overwritten(self, runner, sample_png, temp_dir):
        output = temp_dir / "foo.png"
        output.write_bytes(b"keep me")

        first = invoke(runner, ["-i", sample_png, "-o", output, "-f", "png"])
        second = invoke(runner, ["-i", sample_png, "-o", output, "-f", "png"])

        assert first.exit_code == 0 and second.exit_code == 0
        assert output.read_bytes() == b"keep me"
        assert (temp_dir / "foo_1.png").exists()
        assert (temp_dir / "foo_2.png").exists()

    def test_directory_with_text_file_exits_0(self, runner, image_dir, temp_dir):
        output_dir = temp_dir / "converted"

        result = invoke(runner, ["-i", image_dir, "-o", output_dir, "-f", "png"])

        assert result.exit_code == 0
        assert len(list(output_dir.iterdir())) == 3
        assert "Error processing image" in result.output
        assert "notes.txt" in result.output

    def test_gif_compression_is_a_warning(self, runner, sample_png, temp_dir):
        output = temp_dir / "anim.gif"

        result = invoke(runner, ["-i", sample_png, "-o", output, "-f", "gif", "-c", 50])

        assert result.exit_code == 0
        assert "Warning: Compression setting is not supported for format gif." in (
            result.output
        )
        with Image.open(output) as image:
            assert image.format == "GIF"

    def test_missing_format_creates_nothing(self, runner, sample_png, temp_dir):
        output_dir = temp_dir / "out"

        result = invoke(runner, ["-i", sample_png, "-o", output_dir / "x.png"])

        assert result.exit_code == 1
        assert not output_dir.exists()

    def test_missing_input_exits_1(self, runner, temp_dir):
        result = invoke(
            runner, ["-i", temp_dir / "nope.png", "-o", temp_dir / "out.png", "-f", "png"]
        )

        assert result.exit_code == 1
        assert "Input path does not exist." in result.output

    def test_invalid_single_file_exits_1(self, runner, temp_dir):
        source = temp_dir / "fake.png"
        source.write_text("hello")

        result = invoke(runner, ["-i", source, "-o", temp_dir / "out.png", "-f", "png"])

        assert result.exit_code == 1
        assert f"Error processing image {source}: The input file is not a valid image." in (
            result.output
        )

    def test_flatten_then_other_flags(self, runner, temp_dir, image_generator):
        source = temp_dir / "clear.png"
        source.write_bytes(image_generator(mode="RGBA", color=(0, 0, 0, 0)))
        output = temp_dir / "flat.png"

        result = invoke(
            runner, ["-i", source, "-o", output, "-f", "png", "--flatten", "--grayscale"]
        )

        assert result.exit_code == 0, result.output
        with Image.open(output) as image:
            assert image.mode == "L"
            assert image.getpixel((0, 0)) == 255

    def test_flatten_with_color(self, runner, temp_dir, image_generator):
        source = temp_dir / "clear.png"
        source.write_bytes(image_generator(mode="RGBA", color=(0, 0, 0, 0)))
        output = temp_dir / "flat.png"

        result = invoke(runner, ["-i", source, "-o", output, "-f", "png", "--flatten", "blue"])

        assert result.exit_code == 0, result.output
        with Image.open(output) as image:
            assert image.getpixel((0, 0)) == (0, 0, 255)

    def test_invalid_blur_fails_the_item(self, runner, sample_png, temp_dir):
        result = invoke(
            runner,
            ["-i", sample_png, "-o", temp_dir / "b.png", "-f", "png", "--blur", "nan"],
        )

        assert result.exit_code == 1
        assert "Invalid blur sigma value" in result.output
        assert not (temp_dir / "b.png").exists()

    def test_lossless_webp(self, runner, sample_png, temp_dir):
        output = temp_dir / "lossless.webp"

        result = invoke(runner, ["-i", sample_png, "-o", output, "-f", "webp", "--lossless"])

        assert result.exit_code == 0, result.output
        with Image.open(output) as image:
            assert image.getpixel((50, 50))[:3] == (255, 0, 0)

    @requires_heif
    def test_heic_input_to_jpeg(self, runner, temp_dir):
        buffer = io.BytesIO()
        Image.new("RGB", (640, 480), (30, 120, 200)).save(buffer, format="HEIF")
        source = temp_dir / "photo.heic"
        source.write_bytes(buffer.getvalue())
        output = temp_dir / "photo.jpeg"

        result = invoke(
            runner, ["-i", source, "-o", output, "-f", "jpeg", "-c", 80, "-r", "300x200"]
        )

        assert result.exit_code == 0, result.output
        with Image.open(output) as image:
            assert image.format == "JPEG"
            assert image.size == (300, 200)
