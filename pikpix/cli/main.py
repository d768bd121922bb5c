"""
Main CLI Application
Typer command that converts a file, a URL or a directory of images
"""

import asyncio
import sys
from typing import Annotated, List, Optional

import structlog
import typer

from pikpix import __version__
from pikpix.cli.utils.args import normalize_args
from pikpix.cli.utils.progress import item_progress
from pikpix.config import Settings, get_settings
from pikpix.core.batch.models import BatchResult
from pikpix.core.batch.runner import BatchRunner
from pikpix.core.exceptions import ConfigurationError, NotFoundError
from pikpix.models.conversion import ConversionRequest, validate_options
from pikpix.services.source_service import SourceResolver
from pikpix.utils.console import create_console, create_error_console
from pikpix.utils.logging import setup_logging

logger = structlog.get_logger()

app = typer.Typer(
    name="pikpix",
    help="Convert, compress, resize and optimize images.",
    add_completion=False,
    pretty_exceptions_enable=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    if value:
        create_console().print(__version__)
        raise typer.Exit()


async def _run(request: ConversionRequest, settings: Settings) -> BatchResult:
    async with SourceResolver(settings) as resolver:
        runner = BatchRunner(
            resolver=resolver,
            console=create_console(),
            error_console=create_error_console(),
        )
        total = runner.item_count(request)
        with item_progress(total, enabled=settings.show_progress) as advance:
            return await runner.run(request, on_progress=advance)


@app.command()
def convert(
    input: Annotated[
        Optional[str],
        typer.Option("-i", "--input", help="Input image path, URL or directory"),
    ] = None,
    output: Annotated[
        Optional[str],
        typer.Option("-o", "--output", help="Output image path or directory"),
    ] = None,
    format: Annotated[
        Optional[str],
        typer.Option("-f", "--format", help="Output format (jpeg, png, webp, ...)"),
    ] = None,
    compression: Annotated[
        Optional[int],
        typer.Option("-c", "--compression", help="Compression level (0-100)"),
    ] = None,
    resize: Annotated[
        Optional[str],
        typer.Option(
            "-r",
            "--resize",
            help="Resize dimensions in format WIDTHxHEIGHT or WIDTHXHEIGHT",
        ),
    ] = None,
    flatten: Annotated[
        Optional[str],
        typer.Option(
            "--flatten",
            help="Flatten the image onto the given background color (default white)",
        ),
    ] = None,
    sharpen: Annotated[
        bool, typer.Option("--sharpen", help="Sharpen the image")
    ] = False,
    denoise: Annotated[
        bool, typer.Option("--denoise", help="Reduce noise with a median filter")
    ] = False,
    grayscale: Annotated[
        bool, typer.Option("--grayscale", help="Convert the image to grayscale")
    ] = False,
    blur: Annotated[
        Optional[float],
        typer.Option("--blur", help="Apply blur with the specified sigma value"),
    ] = None,
    auto_optimize: Annotated[
        bool,
        typer.Option(
            "--autoOptimize",
            help="Apply automatic optimizations (sharpen and denoise)",
        ),
    ] = False,
    preserve_aspect_ratio: Annotated[
        bool,
        typer.Option(
            "--preserve-aspect-ratio", help="Preserve aspect ratio when resizing"
        ),
    ] = False,
    lossless: Annotated[
        bool, typer.Option("--lossless", help="Use lossless compression")
    ] = False,
    progressive: Annotated[
        bool, typer.Option("--progressive", help="Use progressive JPEG encoding")
    ] = False,
    subsample: Annotated[
        Optional[str],
        typer.Option(
            "--subsample", help="Apply chroma subsampling rate (e.g., 4:2:0, 4:4:4)"
        ),
    ] = None,
    adaptive_quantization: Annotated[
        bool,
        typer.Option(
            "--adaptive-quantization",
            help="Apply adaptive quantization for better compression",
        ),
    ] = False,
    roi_compression: Annotated[
        Optional[str],
        typer.Option(
            "--roi-compression",
            help="Compress regions given as x:y:width:height:quality, comma separated",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Enable debug logging")
    ] = False,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "-v",
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
):
    """
    Convert an image, a URL or every image in a directory

    Examples:
      pikpix -i photo.heic -o photo.jpeg -f jpeg -c 80 -r 300x200
      pikpix -i photos/ -o converted/ -f webp --lossless
      pikpix -i logo.png -o logo.jpeg -f jpeg --flatten "#000000"
    """
    settings = get_settings()
    setup_logging(
        log_level="DEBUG" if verbose else settings.log_level,
        json_logs=settings.json_logs,
    )
    error_console = create_error_console()

    try:
        request = validate_options(
            {
                "input": input,
                "output": output,
                "format": format,
                "compression": compression,
                "resize": resize,
                "flatten": flatten,
                "sharpen": sharpen,
                "denoise": denoise,
                "grayscale": grayscale,
                "blur": blur,
                "auto_optimize": auto_optimize,
                "preserve_aspect_ratio": preserve_aspect_ratio,
                "lossless": lossless,
                "progressive": progressive,
                "subsample": subsample,
                "adaptive_quantization": adaptive_quantization,
                "roi_compression": roi_compression,
            }
        )
    except ConfigurationError as e:
        logger.debug("Invalid configuration", error_code=e.error_code)
        error_console.print(e.message)
        raise typer.Exit(1)

    try:
        result = asyncio.run(_run(request, settings))
    except NotFoundError as e:
        logger.debug("Input not found", source=request.input)
        error_console.print(e.message)
        raise typer.Exit(1)

    # A directory run always completes; a single item's failure fails the run
    if not result.directory_mode and result.failed:
        raise typer.Exit(1)


def run(argv: Optional[List[str]] = None) -> None:
    """Console script entry point."""
    args = sys.argv[1:] if argv is None else argv
    app(args=normalize_args(args), prog_name="pikpix")


if __name__ == "__main__":
    run()
