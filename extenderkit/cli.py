"""
Command Line Interface for ExtenderKit
"""

import argparse
import sys
import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from . import __version__
from .config import load_config
from .controls import ColorPickerExtender, TextBoxWatermarkExtender
from .emitter import ClientDescriptorEmitter
from .errors import ExtenderError
from .loader import load_definitions
from .registry import PropertyRegistry
from .scripts import ScriptBlockRenderer, collect_script_references

BUNDLED_EXTENDERS = (ColorPickerExtender, TextBoxWatermarkExtender)


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging"""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog='extenderkit',
        description='ExtenderKit - Inspect extender definitions and preview client payloads',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --list                                      # List bundled extenders
  %(prog)s defs.yaml --list                            # Include extenders from a file
  %(prog)s -e ColorPickerExtender --id cp1 --set PopupButtonID=btn1
  %(prog)s defs.yaml -e Slider --id s1 --target TextBox1 -f script
        """
    )

    parser.add_argument(
        'definitions',
        nargs='?',
        help='YAML definition file or directory (bundled extenders are always available)'
    )
    parser.add_argument(
        '--list',
        action='store_true',
        help='List registered extenders and their properties, then exit'
    )

    emit_group = parser.add_argument_group('Emit Options')
    emit_group.add_argument(
        '-e', '--extender',
        help='Extender type name to instantiate'
    )
    emit_group.add_argument(
        '--id',
        dest='control_id',
        default='extender1',
        help='Control id of the extender instance (default: extender1)'
    )
    emit_group.add_argument(
        '--target',
        default='',
        help='Id of the extended (target) control'
    )
    emit_group.add_argument(
        '--target-type',
        help='Type of the target control, checked against the extender targets'
    )
    emit_group.add_argument(
        '--set',
        dest='assignments',
        action='append',
        default=[],
        metavar='NAME=VALUE',
        help='Set a property (can be repeated); VALUE is parsed as YAML'
    )
    emit_group.add_argument(
        '--default-focus',
        help='Default focus control id of the page (for extenders with an on_load hook)'
    )

    output_group = parser.add_argument_group('Output Options')
    output_group.add_argument(
        '-f', '--format',
        choices=['json', 'script'],
        default='json',
        help='Output format (default: json)'
    )
    output_group.add_argument(
        '-o', '--output',
        help='Output file path (default: stdout)'
    )
    output_group.add_argument(
        '-c', '--config',
        help='YAML config file with an "emitter" section'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Debug mode (very verbose, raise errors with traceback)'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser.parse_args(args)


def parse_assignments(assignments: List[str]) -> Dict[str, object]:
    """Parse NAME=VALUE pairs; values go through YAML so 'true' and '3' get typed."""
    values: Dict[str, object] = {}
    for assignment in assignments:
        name, sep, raw = assignment.partition('=')
        if not sep or not name.strip():
            raise ValueError(f"Expected NAME=VALUE, got {assignment!r}")
        try:
            value = yaml.safe_load(raw) if raw.strip() else ''
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid value for {name.strip()}: {e}") from None
        values[name.strip()] = '' if value is None else value
    return values


def list_extenders(registry: PropertyRegistry) -> None:
    """List all registered extenders"""
    types = registry.registered_types()
    print(f"\nRegistered Extenders ({len(types)} total):\n")
    print("-" * 80)

    kind_markers = {
        'plain': ' ',
        'element_id': '#',
        'event': '@',
    }
    for control_type in types:
        metadata = registry.metadata_for(control_type)
        targets = ','.join(metadata.target_control_types) or 'any'
        print(f"\n[{control_type.__name__}] {metadata.behavior_type or '-'} (targets: {targets})")
        scripts = collect_script_references(control_type, registry)
        if scripts:
            print(f"  scripts: {', '.join(scripts)}")
        for descriptor in registry.all_for(control_type):
            marker = kind_markers.get(descriptor.kind.value, ' ')
            required = ' (required)' if descriptor.required else ''
            print(
                f"  {marker} {descriptor.name:<32} -> {descriptor.client_name:<24}"
                f" default={descriptor.default_value!r}{required}"
            )

    print("\n" + "-" * 80)
    print("\nKind markers: # = element id reference, @ = event handler")


def run_emit(args: argparse.Namespace, registry: PropertyRegistry) -> int:
    """Instantiate an extender and print its client payload"""
    control_type = registry.find_type(args.extender)
    if control_type is None:
        print(f"Error: Unknown extender: {args.extender}", file=sys.stderr)
        return 1

    config = load_config(args.config)
    control = control_type(
        args.control_id,
        target_control_id=args.target,
        target_control_type=args.target_type,
        registry=registry,
    )
    control.update(parse_assignments(args.assignments))

    on_load = getattr(control, 'on_load', None)
    if callable(on_load):
        on_load(args.default_focus)

    emitter = ClientDescriptorEmitter(registry=registry, config=config)
    if args.format == 'script':
        content = ScriptBlockRenderer(emitter).render(control)
    else:
        content = emitter.serialize_payload([control])

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(content + "\n")
    else:
        print(content)
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parsed_args = parse_args(args)

    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    registry = PropertyRegistry()
    for control_type in BUNDLED_EXTENDERS:
        registry.ensure_registered(control_type)

    try:
        if parsed_args.definitions:
            path = Path(parsed_args.definitions)
            if not path.exists():
                print(f"Error: Definitions path does not exist: {path}", file=sys.stderr)
                return 1
            load_definitions(path, registry=registry)

        if parsed_args.list:
            list_extenders(registry)
            return 0

        if not parsed_args.extender:
            print("Error: Nothing to do, pass --list or --extender", file=sys.stderr)
            return 1

        return run_emit(parsed_args, registry)
    except (ExtenderError, ValueError) as e:
        if parsed_args.debug:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        if parsed_args.debug:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
