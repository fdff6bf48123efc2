"""
Command-line demo for the OpenAI Images client.

Usage:
    # Generate
    openai-images create "A cute baby sea otter floating on its back in blue water"

    # With options
    openai-images create --model gpt-image-1 --size 1536x1024 --quality high "Mountain landscape at sunset"
    openai-images create --background transparent --output-format webp --compression 90 "A red apple"

    # Edit / variation
    openai-images edit --image otter.png --mask mask.png "Add a tiny hat"
    openai-images vary --image otter.png --n 2

Set OPENAI_API_KEY before running.
"""

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from . import __version__
from .client import OpenAIImagesClient
from .config import API_KEY_ENV, ConfigError, load_settings
from .errors import OpenAIImagesError
from .image_utils import load_image_file, save_image_data
from .request_builder import DEFAULT_MODELS, DEFAULT_QUALITY, MODEL_FIELDS
from .types import (
    BackgroundType,
    ImageModel,
    ImageOperation,
    ImageQuality,
    ImageSize,
    ImageStyle,
    ImagesResponse,
    ModerationLevel,
    OutputFormat,
    ResponseFormat,
)

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1


def setup_logging(level: str = "WARNING", log_format: str = "text") -> None:
    """Configure logging.

    Args:
        level: log level name
        log_format: json or text
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    if log_format == "json":
        logging.basicConfig(
            level=log_level,
            format='{"time":"%(asctime)s","level":"%(levelname)s","name":"%(name)s","message":"%(message)s"}',
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def _values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]


def _add_common_options(parser: argparse.ArgumentParser, operation: ImageOperation) -> None:
    default_model = DEFAULT_MODELS[operation].value
    parser.add_argument(
        "--model",
        default=default_model,
        choices=_values(ImageModel),
        help=f"Model to use (default: {default_model})",
    )
    parser.add_argument("--n", type=int, default=1, help="Number of images to generate (1-10)")
    parser.add_argument("--size", choices=_values(ImageSize), help="Image size")
    parser.add_argument(
        "--response-format",
        choices=_values(ResponseFormat),
        help="url or b64_json (dall-e models only)",
    )
    parser.add_argument("--user", help="End-user identifier")
    parser.add_argument("--output-dir", type=Path, help="Save inline (b64_json) images to this directory")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="openai-images",
        description="Demo for the OpenAI Images client.",
        epilog=f"Set your {API_KEY_ENV} environment variable before running.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, help="YAML configuration file")
    subparsers = parser.add_subparsers(dest="command", metavar="command")

    create = subparsers.add_parser("create", help="Create images from a prompt")
    create.add_argument("prompt", nargs="+", help="Image prompt")
    _add_common_options(create, ImageOperation.GENERATE)
    create.add_argument("--quality", choices=_values(ImageQuality), help="Image quality (not dall-e-2)")
    create.add_argument("--style", choices=_values(ImageStyle), help="Image style (dall-e-3 only)")
    create.add_argument("--background", choices=_values(BackgroundType), help="Background (gpt-image-1 only)")
    create.add_argument("--output-format", choices=_values(OutputFormat), help="Output format (gpt-image-1 only)")
    create.add_argument("--compression", type=int, help="Compression 0-100 for webp/jpeg (gpt-image-1 only)")
    create.add_argument("--moderation", choices=_values(ModerationLevel), help="Moderation level (gpt-image-1 only)")

    edit = subparsers.add_parser("edit", help="Edit an image")
    edit.add_argument("prompt", nargs="+", help="Description of the edit")
    edit.add_argument("--image", type=Path, required=True, help="Image to edit")
    edit.add_argument("--mask", type=Path, help="Mask image; transparent areas are edited")
    _add_common_options(edit, ImageOperation.EDIT)

    vary = subparsers.add_parser("vary", help="Create variations of an image")
    vary.add_argument("--image", type=Path, required=True, help="Source image")
    _add_common_options(vary, ImageOperation.VARY)

    subparsers.add_parser("help", help="Show this message")

    return parser


def _print_settings(args: argparse.Namespace, operation: ImageOperation) -> None:
    model = ImageModel(args.model)
    gated = MODEL_FIELDS[model]

    print("Request parameters:")
    prompt = getattr(args, "prompt", None)
    if prompt:
        print(f"- Prompt: {' '.join(prompt)}")
    print(f"- Model: {model.value}")
    print(f"- Number of images: {args.n}")
    if args.size:
        print(f"- Size: {args.size}")
    if operation is ImageOperation.GENERATE:
        if "quality" in gated:
            print(f"- Quality: {args.quality or DEFAULT_QUALITY[model].value}")
        if "style" in gated and args.style:
            print(f"- Style: {args.style}")
        if "background" in gated and args.background:
            print(f"- Background: {args.background}")
        if "output_format" in gated and args.output_format:
            print(f"- Output format: {args.output_format}")
        if "output_compression" in gated and args.compression is not None:
            print(f"- Output compression: {args.compression}%")
        if "moderation" in gated and args.moderation:
            print(f"- Moderation level: {args.moderation}")


def _create(client: OpenAIImagesClient, args: argparse.Namespace) -> ImagesResponse:
    return client.create_image(
        " ".join(args.prompt),
        model=args.model,
        n=args.n,
        quality=args.quality,
        response_format=args.response_format,
        size=args.size,
        style=args.style,
        user=args.user,
        background=args.background,
        output_format=args.output_format,
        output_compression=args.compression,
        moderation=args.moderation,
    )


def _edit(client: OpenAIImagesClient, args: argparse.Namespace) -> ImagesResponse:
    image = load_image_file(args.image)
    mask = load_image_file(args.mask) if args.mask else None
    return client.edit_image(
        image,
        " ".join(args.prompt),
        mask=mask,
        model=args.model,
        n=args.n,
        size=args.size,
        response_format=args.response_format,
        user=args.user,
    )


def _vary(client: OpenAIImagesClient, args: argparse.Namespace) -> ImagesResponse:
    return client.create_image_variation(
        load_image_file(args.image),
        model=args.model,
        n=args.n,
        response_format=args.response_format,
        size=args.size,
        user=args.user,
    )


COMMANDS = {
    "create": (ImageOperation.GENERATE, _create),
    "edit": (ImageOperation.EDIT, _edit),
    "vary": (ImageOperation.VARY, _vary),
}


def print_response(response: ImagesResponse, output_dir: Optional[Path] = None) -> None:
    created = datetime.fromtimestamp(response.created, tz=timezone.utc)
    print("\nRequest successful!")
    print(f"- Created at: {created:%Y-%m-%d %H:%M:%S} UTC")
    print(f"- Number of images returned: {len(response.data)}")

    for index, item in enumerate(response.data, start=1):
        if item.url:
            print(f"\nImage {index} URL:")
            print(item.url)
        elif item.has_inline_data:
            if output_dir is not None:
                path = save_image_data(item, output_dir / f"image_{response.created}_{index}")
                print(f"\nImage {index} saved to {path}")
            else:
                print(f"\nImage {index}: Base64 data available")

        if item.revised_prompt:
            print(f"\nRevised prompt for image {index}:")
            print(item.revised_prompt)

    usage = response.usage
    if usage is not None:
        print("\nToken usage:")
        print(f"- Total tokens: {usage.total_tokens}")
        print(f"- Input tokens: {usage.input_tokens}")
        print(f"- Output tokens: {usage.output_tokens}")
        if usage.input_tokens_details is not None:
            print(f"- Text tokens: {usage.input_tokens_details.text_tokens}")
            print(f"- Image tokens: {usage.input_tokens_details.image_tokens}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_FAILURE
    if args.command == "help":
        parser.print_help()
        return 0

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    setup_logging(settings.logging.level, settings.logging.format)

    if not settings.client.api_key:
        print(f"Error: Please set the {API_KEY_ENV} environment variable", file=sys.stderr)
        return EXIT_FAILURE

    client = OpenAIImagesClient(
        api_key=settings.client.api_key,
        base_url=settings.client.base_url,
        timeout=settings.client.timeout,
    )

    operation, handler = COMMANDS[args.command]
    _print_settings(args, operation)
    print("\nWaiting for the API... This may take a few moments.")

    try:
        response = handler(client, args)
        print_response(response, args.output_dir)
    except OpenAIImagesError as e:
        logger.debug("Request failed", exc_info=True)
        print(f"\nError: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except OSError as e:
        print(f"\nError: {e}", file=sys.stderr)
        return EXIT_FAILURE

    return 0


if __name__ == "__main__":
    sys.exit(main())
