"""Batch orchestration: one input or every entry of a directory, one at a time."""

import asyncio
import os
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console

from pikpix.core.batch.models import BatchResult, ItemResult, ItemStatus
from pikpix.core.batch.naming import name_for
from pikpix.core.conversion.pipeline import build_pipeline
from pikpix.core.exceptions import NotFoundError, PikPixError
from pikpix.models.conversion import ConversionRequest
from pikpix.services.source_service import ImageAsset, SourceResolver
from pikpix.utils.console import create_console, create_error_console
from pikpix.utils.logging import LoggingContext, get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[ItemResult], None]


class BatchRunner:
    """Runs a ConversionRequest against its input.

    Items are awaited one after another so that the output namer's
    check-then-write and the progress count stay consistent.
    """

    def __init__(
        self,
        resolver: Optional[SourceResolver] = None,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
    ) -> None:
        self.resolver = resolver or SourceResolver()
        self.console = console or create_console()
        self.error_console = error_console or create_error_console()

    def item_count(self, request: ConversionRequest) -> int:
        """Number of items a run will process (for progress display)."""
        if os.path.isdir(request.input):
            return len(self.resolver.entries(request.input))
        return 1

    async def run(
        self,
        request: ConversionRequest,
        on_progress: Optional[ProgressCallback] = None,
    ) -> BatchResult:
        """
        Process every item of the request's input.

        Args:
            request: Validated conversion request
            on_progress: Called once after each finished item

        Returns:
            One ItemResult per processed input

        Raises:
            NotFoundError: If the input is neither an existing path nor a URL
        """
        input_path = Path(request.input)
        if not input_path.exists() and not request.is_remote:
            raise NotFoundError(details={"source": request.input})

        if input_path.is_dir():
            result = BatchResult(directory_mode=True)
            # Listed before the first write; the output may be the input directory
            entries = self.resolver.entries(request.input)
            output_dir = Path(request.output)
            output_dir.mkdir(parents=True, exist_ok=True)

            for name, path in entries:
                item = await self._process_item(
                    request,
                    name=name,
                    source=path,
                    output_dir=str(output_dir),
                    base_name=Path(name).stem,
                    local_only=True,
                )
                result.items.append(item)
                if on_progress:
                    on_progress(item)
        else:
            result = BatchResult(directory_mode=False)
            output = Path(request.output)
            item = await self._process_item(
                request,
                name=request.input,
                source=request.input,
                output_dir=str(output.parent),
                base_name=output.stem,
                local_only=False,
            )
            result.items.append(item)
            if on_progress:
                on_progress(item)

        logger.info(
            "Run finished",
            directory_mode=result.directory_mode,
            succeeded=len(result.succeeded),
            failed=len(result.failed),
        )
        return result

    async def _process_item(
        self,
        request: ConversionRequest,
        name: str,
        source: str,
        output_dir: str,
        base_name: str,
        local_only: bool,
    ) -> ItemResult:
        with LoggingContext(item=name):
            warnings = []
            try:
                asset: ImageAsset
                if local_only:
                    asset = await self.resolver.read_file(source)
                else:
                    asset = await self.resolver.resolve(source)

                pipeline = build_pipeline(request)
                warnings = pipeline.warnings
                for warning in warnings:
                    self.error_console.print(f"Warning: {warning}")

                data = await asyncio.to_thread(pipeline.apply, asset)
                target = name_for(output_dir, base_name, request.format)
                await asyncio.to_thread(target.path.write_bytes, data)

            except PikPixError as e:
                return self._failure(name, source, e.message, e.error_code, warnings)
            except Exception as e:
                logger.debug("Unexpected item failure", exc_info=True)
                return self._failure(name, source, str(e), None, warnings)

            self.console.print(
                f"Converted {source} to {target.path} as {request.format}"
            )
            logger.debug("Item converted", output=str(target.path), size=len(data))
            return ItemResult(
                name=name,
                source=source,
                status=ItemStatus.COMPLETED,
                output_path=str(target.path),
                warnings=warnings,
            )

    def _failure(
        self,
        name: str,
        source: str,
        message: str,
        error_code: Optional[str],
        warnings: list,
    ) -> ItemResult:
        self.error_console.print(f"Error processing image {source}: {message}")
        logger.info("Item failed", error=message, error_code=error_code)
        return ItemResult(
            name=name,
            source=source,
            status=ItemStatus.FAILED,
            error=message,
            error_code=error_code,
            warnings=warnings,
        )
