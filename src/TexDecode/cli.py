"""Command-line interface for inspecting DDS and KTX textures."""

import argparse
import json
import logging
import os
import sys

from tqdm import tqdm

from .config import DecoderConfig
from .core import dump_level0, inspect_texture, iter_textures, save_manifest, setup_logging

logger = logging.getLogger("texture_decode")


def _collect(paths, config):
    """Yield ``(record, texture)`` for every file or directory in ``paths``."""
    for path in paths:
        if os.path.isdir(path):
            for _, record, texture in iter_textures(path, config):
                yield record, texture
        else:
            yield inspect_texture(path, config)


def _dump(record, texture, dump_dir, written):
    """Write ``texture`` as ``<relative path>.bin``; a target already written is an error."""
    target = os.path.join(dump_dir, *record.filepath.split("/")) + ".bin"
    key = os.path.normcase(os.path.abspath(target))
    if key in written:
        logger.error("Dump target %s already written for %s", target, written[key])
        record.status = "error"
        record.error = f"DumpCollision: {target} already written for {written[key]}"
        return
    try:
        dump_level0(texture, target)
    except (OSError, ValueError) as exc:
        logger.error("Failed to dump %s to %s: %s", record.filepath, target, exc)
        record.status, record.error = "error", f"{type(exc).__name__}: {exc}"
        return
    written[key] = record.filepath


def _print_records(records, as_json):
    if as_json:
        print(json.dumps([r.to_dict() for r in records], indent=2))
        return
    for r in records:
        if r.ok:
            print(
                f"{r.filepath}: {r.container} {r.format_name} "
                f"{r.width}x{r.height} ({r.byte_length} bytes)"
            )
        else:
            print(f"{r.filepath}: ERROR {r.error}")


def main(argv=None):
    """Parse CLI arguments, decode the given textures, and report results."""
    parser = argparse.ArgumentParser(
        description="Decode level 0 of DDS and KTX texture containers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  TexDecode brick.dds
  TexDecode ./textures --json
  TexDecode ./textures --dump-dir ./level0 --manifest ./textures.csv
  TexDecode --generate-config -c texdecode.yaml
        """
    )
    parser.add_argument("paths", nargs="*", help="Texture files or directories")
    parser.add_argument("--config", "-c", help="Path to config YAML")
    parser.add_argument("--json", action="store_true",
                        help="Print results as JSON")
    parser.add_argument("--dump", action="store_true",
                        help="Write each level-0 payload to the configured output_dir")
    parser.add_argument("--dump-dir", help="Write each level-0 payload as <relative path>.bin here")
    parser.add_argument("--manifest", help="Write a CSV manifest of all results")
    parser.add_argument("--generate-config", action="store_true",
                        help="Generate default config YAML")
    parser.add_argument("--log-level",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])

    args = parser.parse_args(argv)

    if args.generate_config:
        dest = args.config or "texdecode.yaml"
        if os.path.isdir(dest):
            dest = os.path.join(dest, "texdecode.yaml")
        DecoderConfig().to_yaml(dest)
        print(f"Generated default {dest}")
        return

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    if args.config:
        if not os.path.exists(args.config):
            logger.error("Config file not found: %s", args.config)
            print(f"Error: Config file not found: {args.config}", file=sys.stderr)
            sys.exit(1)
        try:
            config = DecoderConfig.from_yaml(args.config)
        except ValueError as e:
            logger.error("Invalid config file '%s': %s", args.config, e)
            print(f"Error: Invalid config: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        config = DecoderConfig()

    if args.log_level:
        config.log_level = args.log_level
    if args.manifest:
        config.manifest_path = args.manifest

    try:
        config.validate()
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    setup_logging(config.log_level, config.log_file or None)

    if not args.paths:
        parser.print_usage(sys.stderr)
        print("Error: no input paths given", file=sys.stderr)
        sys.exit(1)
    missing = [p for p in args.paths if not os.path.exists(p)]
    if missing:
        print(f"Error: Input not found: {', '.join(missing)}", file=sys.stderr)
        logger.error("Input paths not found: %s", missing)
        sys.exit(1)

    dump_dir = args.dump_dir or (config.output_dir if args.dump else "")
    records, written = [], {}
    progress = tqdm(_collect(args.paths, config), desc="Decoding", unit="tex",
                    disable=not dump_dir)
    for record, texture in progress:
        if dump_dir and texture is not None:
            _dump(record, texture, dump_dir, written)
        records.append(record)
    if config.manifest_path:
        save_manifest(records, config.manifest_path)

    _print_records(records, args.json)

    if any(not r.ok for r in records):
        sys.exit(1)


if __name__ == "__main__":
    main()
