"""Stirling PDF operations exposed as MCP tools.

Every operation runs the same pipeline:

    extract arguments -> validate -> decode files -> build multipart body
    -> call API -> encode result -> format text

so each tool is declared as an ``Operation`` entry in ``OPERATIONS`` and
``run_operation`` does the work. Failures never propagate: they are
returned as "❌ Error: ..." text.
"""

import logging
import traceback
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Tuple

from .client import MultipartRequest
from .codec import PDF_MEDIA_TYPE, ZIP_MEDIA_TYPE, decode_data_url, encode_data_url, image_extension
from .config import LOGGER_NAME
from .errors import DecodeError, StirlingPdfError, ValidationError
from .logging_utils import RequestContext
from .validators import (
    coerce_string,
    coerce_string_list,
    require_choice,
    require_hex_color,
    require_min_count,
    require_non_empty,
    split_csv,
)

logger = logging.getLogger(LOGGER_NAME)

FILE_FIELD = "fileInput"
BOOL_CHOICES = ("true", "false")


class ApiClient(Protocol):
    async def call(self, endpoint: str, request: MultipartRequest,
                   ctx: Optional[RequestContext] = None) -> bytes: ...


@dataclass(frozen=True)
class Param:
    """A string argument forwarded as one or more multipart text fields."""

    name: str
    description: str
    default: Optional[str] = None  # None means required
    choices: Tuple[str, ...] = ()
    form_field: Optional[str] = None
    comma_list: bool = False
    hex_color: bool = False

    @property
    def required(self) -> bool:
        return self.default is None

    @property
    def field_name(self) -> str:
        return self.form_field or self.name

    def schema(self) -> Dict[str, Any]:
        description = self.description
        if not self.required:
            description += f" (default: {self.default})"
        prop: Dict[str, Any] = {"type": "string", "description": description}
        if self.choices:
            prop["enum"] = list(self.choices)
        return prop

    def extract(self, arguments: Dict[str, Any]) -> str:
        value = coerce_string(arguments.get(self.name), self.name)
        if self.required:
            value = require_non_empty(value, self.name)
        elif value is None:
            value = self.default
        if self.choices:
            require_choice(value, self.choices, self.name)
        if self.hex_color:
            require_hex_color(value, self.name)
        if self.comma_list and not split_csv(value):
            raise ValidationError(f"{self.name} is required")
        return value

    def form_values(self, value: str) -> List[str]:
        return split_csv(value) if self.comma_list else [value]


@dataclass(frozen=True)
class Operation:
    """Declarative description of one Stirling PDF endpoint."""

    name: str
    description: str
    endpoint: str
    file_arg: str
    file_description: str
    summary: str
    params: Tuple[Param, ...] = ()
    # None: a single file; otherwise the minimum number of files
    min_files: Optional[int] = None
    file_noun: str = "PDF file"
    image_input: bool = False
    constants: Tuple[Tuple[str, str], ...] = ()
    output_media_type: str = PDF_MEDIA_TYPE

    @property
    def multiple_files(self) -> bool:
        return self.min_files is not None

    @property
    def returns_archive(self) -> bool:
        return self.output_media_type == ZIP_MEDIA_TYPE

    def input_schema(self) -> Dict[str, Any]:
        if self.multiple_files:
            file_prop = {"type": "array", "items": {"type": "string"}, "description": self.file_description}
        else:
            file_prop = {"type": "string", "description": self.file_description}
        properties: Dict[str, Any] = {self.file_arg: file_prop}
        for param in self.params:
            properties[param.name] = param.schema()
        required = [self.file_arg] + [p.name for p in self.params if p.required]
        return {"type": "object", "properties": properties, "required": required}

    def extract_files(self, arguments: Dict[str, Any]) -> List[str]:
        raw = arguments.get(self.file_arg)
        if not self.multiple_files:
            return [require_non_empty(coerce_string(raw, self.file_arg), self.file_arg)]

        files = coerce_string_list(raw, self.file_arg)
        require_min_count(files, self.min_files, self.file_arg, self.file_noun)
        return [require_non_empty(item, f"{self.file_arg}[{index + 1}]") for index, item in enumerate(files)]

    def filename(self, index: int, payload: str) -> str:
        if self.image_input:
            return f"image{index + 1}.{image_extension(payload)}"
        if self.multiple_files:
            return f"file{index + 1}.pdf"
        return "input.pdf"

    def build_request(self, files: List[str], values: Dict[str, str]) -> MultipartRequest:
        request = MultipartRequest()
        for index, payload in enumerate(files):
            content = decode_data_url(payload)
            if not content:
                label = f"{self.file_arg}[{index + 1}]" if self.multiple_files else self.file_arg
                raise DecodeError(f"{label} contains no data")
            request.add_file(FILE_FIELD, self.filename(index, payload), content)
        for param in self.params:
            for value in param.form_values(values[param.name]):
                request.add_field(param.field_name, value)
        for name, value in self.constants:
            request.add_field(name, value)
        return request


def format_success(summary: str, data_url: str, archive: bool) -> str:
    if archive:
        label = "📦 Result (ZIP file as base64 data URL):"
    else:
        label = "📄 Result (base64 data URL):"
    return f"✅ {summary}\n\n{label}\n{data_url}"


def format_error(error: Exception) -> str:
    message = error.message if isinstance(error, StirlingPdfError) else str(error)
    return f"❌ Error: {message or error.__class__.__name__}"


async def run_operation(operation: Operation, arguments: Optional[Dict[str, Any]], client: ApiClient) -> str:
    """Run one tool call end to end and return the result text."""
    arguments = arguments or {}
    ctx = RequestContext(tool_name=operation.name)

    try:
        files = operation.extract_files(arguments)
        values = {param.name: param.extract(arguments) for param in operation.params}
        ctx.log_start(len(files))

        request = operation.build_request(files, values)
        result = await client.call(operation.endpoint, request, ctx)

        data_url = encode_data_url(result, operation.output_media_type)
        summary = operation.summary.format(file_count=len(files), **values)
        ctx.log_complete(success=True)
        return format_success(summary, data_url, operation.returns_archive)

    except StirlingPdfError as e:
        ctx.log_error(e.error_code, e.message)
        ctx.log_complete(success=False)
        return format_error(e)
    except Exception as e:
        ctx.log_error("E_INTERNAL_ERROR", str(e))
        logger.error(traceback.format_exc())
        ctx.log_complete(success=False)
        return format_error(e)


PDF_FILE = "PDF file as base64 data URL"

OPERATIONS: Tuple[Operation, ...] = (
    Operation(
        name="merge_pdfs",
        description="Merge multiple PDF files into a single PDF document",
        endpoint="/api/v1/general/merge-pdfs",
        file_arg="pdfFiles",
        file_description="Array of PDF files as base64 data URLs (at least 2 files)",
        min_files=2,
        params=(
            Param("sortType", "How to sort files before merging", default="orderProvided",
                  choices=("orderProvided", "alphabetical", "reverseAlphabetical")),
        ),
        summary="Successfully merged {file_count} PDF files",
    ),
    Operation(
        name="split_pdf",
        description="Split a PDF document into multiple files at specified page numbers",
        endpoint="/api/v1/general/split-pages",
        file_arg="pdfFile",
        file_description=PDF_FILE,
        params=(
            Param("pageNumbers", "Comma-separated page numbers to split at (e.g., '2,4,6')"),
        ),
        output_media_type=ZIP_MEDIA_TYPE,
        summary="Successfully split PDF at pages: {pageNumbers}",
    ),
    Operation(
        name="compress_pdf",
        description="Compress a PDF file to reduce its size",
        endpoint="/api/v1/misc/compress-pdf",
        file_arg="pdfFile",
        file_description=PDF_FILE,
        params=(
            Param("optimizeLevel", "Optimization level: 0=minimal, 1=low, 2=medium, 3=high",
                  default="2", choices=("0", "1", "2", "3")),
        ),
        constants=(("fastWebView", "false"),),
        summary="Successfully compressed PDF (optimization level: {optimizeLevel})",
    ),
    Operation(
        name="convert_pdf_to_images",
        description="Convert PDF pages to image files",
        endpoint="/api/v1/convert/pdf/img",
        file_arg="pdfFile",
        file_description=PDF_FILE,
        params=(
            Param("imageFormat", "Output image format", default="png", choices=("png", "jpg", "gif")),
            Param("dpi", "DPI for output images", default="300"),
        ),
        constants=(("colorType", "color"), ("singleOrMultiple", "multiple")),
        output_media_type=ZIP_MEDIA_TYPE,
        summary="Successfully converted PDF to {imageFormat} images",
    ),
    Operation(
        name="rotate_pdf",
        description="Rotate pages in a PDF document",
        endpoint="/api/v1/general/rotate-pdf",
        file_arg="pdfFile",
        file_description=PDF_FILE,
        params=(
            Param("angle", "Rotation angle in degrees", default="90", choices=("90", "180", "270")),
            Param("pageNumbers", "Page numbers to rotate (comma-separated) or 'all'", default="all"),
        ),
        summary="Successfully rotated PDF pages by {angle}°",
    ),
    Operation(
        name="add_watermark",
        description="Add a text watermark to a PDF document",
        endpoint="/api/v1/security/add-watermark",
        file_arg="pdfFile",
        file_description=PDF_FILE,
        params=(
            Param("watermarkText", "Text to use as watermark"),
            Param("fontSize", "Font size for watermark", default="30"),
            Param("opacity", "Opacity of watermark 0.0-1.0", default="0.5"),
            Param("rotation", "Rotation angle of watermark in degrees", default="45"),
            Param("customColor", "Watermark color as a hex value #RRGGBB", default="#000000", hex_color=True),
        ),
        constants=(
            ("watermarkType", "text"),
            ("alphabet", "roman"),
            ("widthSpacer", "50"),
            ("heightSpacer", "50"),
        ),
        summary='Successfully added watermark: "{watermarkText}"',
    ),
    Operation(
        name="remove_pages",
        description="Remove specified pages from a PDF document",
        endpoint="/api/v1/general/remove-pages",
        file_arg="pdfFile",
        file_description=PDF_FILE,
        params=(
            Param("pagesToRemove", "Comma-separated page numbers to remove (e.g., '1,3,5-7')",
                  form_field="pagesToDelete"),
        ),
        summary="Successfully removed pages: {pagesToRemove}",
    ),
    Operation(
        name="extract_images",
        description="Extract all images from a PDF document",
        endpoint="/api/v1/general/extract-images",
        file_arg="pdfFile",
        file_description=PDF_FILE,
        params=(
            Param("format", "Output image format", default="png", choices=("png", "jpg", "gif")),
        ),
        output_media_type=ZIP_MEDIA_TYPE,
        summary="Successfully extracted images from PDF",
    ),
    Operation(
        name="convert_images_to_pdf",
        description="Convert one or more images to a PDF document",
        endpoint="/api/v1/convert/img/pdf",
        file_arg="imageFiles",
        file_description="Array of image files as base64 data URLs",
        min_files=1,
        file_noun="image file",
        image_input=True,
        params=(
            Param("fitOption", "How to fit images on pages", default="fillPage",
                  choices=("fillPage", "fitDocumentToImage", "maintainAspectRatio")),
            Param("colorType", "Color mode for output", default="color",
                  choices=("color", "greyscale", "blackwhite")),
        ),
        constants=(("autoRotate", "false"),),
        summary="Successfully converted {file_count} images to PDF",
    ),
    Operation(
        name="ocr_pdf",
        description="Perform OCR on a PDF to make it searchable",
        endpoint="/api/v1/misc/ocr-pdf",
        file_arg="pdfFile",
        file_description=PDF_FILE,
        params=(
            Param("languages", "Comma-separated language codes (e.g., 'eng', 'eng,spa,fra')",
                  default="eng", comma_list=True),
            Param("sidecar", "Generate sidecar text file", default="false", choices=BOOL_CHOICES),
            Param("deskew", "Deskew pages before OCR", default="false", choices=BOOL_CHOICES),
            Param("clean", "Clean pages before OCR", default="false", choices=BOOL_CHOICES),
            Param("cleanFinal", "Clean final output", default="false", choices=BOOL_CHOICES),
            Param("ocrType", "OCR processing mode", default="skip-text",
                  choices=("skip-text", "force-ocr", "Normal")),
        ),
        summary="Successfully performed OCR on PDF\nLanguages: {languages}",
    ),
)

OPERATIONS_BY_NAME: Dict[str, Operation] = {op.name: op for op in OPERATIONS}
