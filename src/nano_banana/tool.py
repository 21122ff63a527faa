"""The ``generate_image`` tool: generate, persist, and report."""

from __future__ import annotations

import asyncio
import base64
import logging
from collections.abc import Mapping
from typing import Annotated, Any, Literal

from mcp.types import CallToolResult, ImageContent, TextContent, Tool, ToolAnnotations
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError, field_validator

from nano_banana.client import GenerationClient, GenerationResult
from nano_banana.config import MAX_PROMPT_LENGTH, OUTPUT_MIME_TYPE
from nano_banana.exceptions import InvalidInputError, NanoBananaError
from nano_banana.persistence import ImagePersistor, SaveResult

logger = logging.getLogger(__name__)

TOOL_NAME = "generate_image"
TOOL_TITLE = "Generate Image"
TOOL_DESCRIPTION = (
    "Generate an image from a text prompt using Google Gemini and save the JPEG to disk. "
    "If save_path is omitted or unusable, the image is saved to a default output directory."
)


class GenerateImageInput(BaseModel):
    """Arguments accepted by ``generate_image``."""

    model_config = ConfigDict(extra="forbid")

    prompt: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_PROMPT_LENGTH)
    ] = Field(description="Descriptive text prompt for generating the image")
    save_path: Annotated[str, StringConstraints(min_length=1)] | None = Field(
        default=None,
        description=(
            "Optional path to save the JPEG image. Can be a directory (e.g. ~/images) or a full file "
            "path ending in .jpg/.jpeg (e.g. ./photo.jpg). Relative paths resolve against the server's "
            "working directory. Falls back to a default directory when it cannot be used."
        ),
    )

    @field_validator("save_path")
    @classmethod
    def _reject_null_bytes(cls, value: str | None) -> str | None:
        if value is not None and "\0" in value:
            raise ValueError("save_path cannot contain null bytes")
        return value


class GenerateImageOutput(BaseModel):
    """Structured record returned on success."""

    file_path: str = Field(description="Absolute path where the generated image was saved")
    mime_type: Literal["image/jpeg"] = Field(description="MIME type for generated image bytes")
    model: str = Field(description="Gemini model used for generation")
    text: str | None = Field(default=None, description="Optional text response from the model")


def parse_arguments(arguments: Mapping[str, Any] | None) -> GenerateImageInput:
    try:
        return GenerateImageInput.model_validate(dict(arguments or {}))
    except ValidationError as exc:
        messages = [
            f"{'.'.join(str(loc) for loc in error['loc']) or 'arguments'}: {error['msg']}" for error in exc.errors()
        ]
        raise InvalidInputError(messages) from exc


def build_success_result(result: GenerationResult, saved: SaveResult) -> CallToolResult:
    output = GenerateImageOutput(
        file_path=str(saved.file_path),
        mime_type=OUTPUT_MIME_TYPE,
        model=result.model,
        text=result.text,
    )
    status_lines = [
        *([result.text] if result.text else []),
        *([saved.warning] if saved.warning else []),
        f"Image saved to: {saved.file_path}",
        f"Model: {result.model}",
    ]
    return CallToolResult(
        content=[
            TextContent(type="text", text="\n\n".join(status_lines)),
            ImageContent(
                type="image",
                data=base64.b64encode(result.image_bytes).decode("ascii"),
                mimeType=result.mime_type,
            ),
        ],
        structuredContent=output.model_dump(exclude_none=True),
    )


def build_error_result(message: str) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=f"Error generating image: {message}")],
        isError=True,
    )


class GenerateImageTool:
    """Compose generation and persistence into one tool call."""

    name = TOOL_NAME

    def __init__(
        self,
        client: GenerationClient | None = None,
        persistor: ImagePersistor | None = None,
    ) -> None:
        self.client = client or GenerationClient()
        self.persistor = persistor or ImagePersistor()

    def definition(self) -> Tool:
        return Tool(
            name=TOOL_NAME,
            title=TOOL_TITLE,
            description=TOOL_DESCRIPTION,
            inputSchema=GenerateImageInput.model_json_schema(),
            outputSchema=GenerateImageOutput.model_json_schema(),
            annotations=ToolAnnotations(
                title=TOOL_TITLE,
                readOnlyHint=False,
                destructiveHint=False,
                idempotentHint=False,
                openWorldHint=True,
            ),
        )

    async def run(self, arguments: Mapping[str, Any] | None) -> CallToolResult:
        """Run the tool; failures become error results instead of exceptions."""
        try:
            params = parse_arguments(arguments)
            result = await asyncio.to_thread(self.client.generate, params.prompt)
            saved = await asyncio.to_thread(self.persistor.save, result.image_bytes, params.save_path)
        except NanoBananaError as exc:
            logger.warning("generate_image failed: %s", exc)
            return build_error_result(str(exc))
        except Exception as exc:
            logger.exception("Unexpected error in generate_image")
            return build_error_result(str(exc) or "Unknown error")

        return build_success_result(result, saved)
