import argparse
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import build_config
from .errors import ToyBridgeError
from .options_schema import OPTIONS
from .project import create_project_from_document, create_project_from_remote_url
from .remote import load_document

API_KEY_ENV = "SHADERTOY_API_KEY"

def add_option_args(parser: argparse.ArgumentParser):
    parser.add_argument("--config", help="Path to config file (YAML or JSON)")
    for opt in OPTIONS:
        arg_name = f"--{opt.name.replace('_', '-')}"
        help_text = opt.help_text or opt.label
        if opt.type == "bool":
            parser.add_argument(arg_name, action=argparse.BooleanOptionalAction, default=None, help=help_text)
        elif opt.type == "int":
            parser.add_argument(arg_name, type=int, help=help_text)
        elif opt.type == "float":
            parser.add_argument(arg_name, type=float, help=help_text)
        elif opt.type == "choice":
            parser.add_argument(arg_name, choices=opt.choices, help=help_text)
        else:
            parser.add_argument(arg_name, type=str, help=help_text)

def config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    cli_args = {}
    for opt in OPTIONS:
        val = getattr(args, opt.name, None)
        if val is not None:
            cli_args[opt.name] = val
    return build_config(Path(args.config) if args.config else None, cli_args)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert Shadertoy projects into wvr projects")
    subparsers = parser.add_subparsers(dest="command")

    # Import
    import_parser = subparsers.add_parser("import", help="Fetch a shader from Shadertoy and create a project")
    import_parser.add_argument("url", help="Shader page URL or shader id")
    import_parser.add_argument("--api-key", help=f"Shadertoy API key (default: ${API_KEY_ENV})")
    add_option_args(import_parser)

    # Convert
    convert_parser = subparsers.add_parser("convert", help="Create a project from a saved API document")
    convert_parser.add_argument("document", help="Path to the JSON document")
    add_option_args(convert_parser)

    # Serve
    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on")

    return parser

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        import uvicorn
        from .server.app import app
        uvicorn.run(app, host=args.host, port=args.port)
        return 0

    if args.command not in ("import", "convert"):
        parser.print_help()
        return 0

    try:
        cfg = config_from_args(args)
        if args.command == "import":
            api_key = args.api_key or os.environ.get(API_KEY_ENV)
            if not api_key:
                print(f"Error: no API key given (use --api-key or set {API_KEY_ENV})", file=sys.stderr)
                return 1
            config_path = create_project_from_remote_url(Path(cfg["data_dir"]), args.url, api_key, cfg)
        else:
            document = load_document(Path(args.document))
            config_path = create_project_from_document(Path(cfg["data_dir"]), document, cfg)
    except ToyBridgeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(config_path)
    return 0

if __name__ == "__main__":
    sys.exit(main())
