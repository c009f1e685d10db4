import argparse
import sys
from pathlib import Path

# Add project root to path for robust execution
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from lyricseg.config import Config, load_config, save_rule_tables
from lyricseg.data_validation import validate
from lyricseg.io_utils import load_spans, load_token_lists, save_lines, save_token_lists
from lyricseg.layout import render_lines
from lyricseg.logging_utils import setup_logging
from lyricseg.segmenter import segment
from lyricseg.tokenizer import MecabTokenizer, tokenize_spans

def main():
    """
    Main command-line interface for the lyric segmentation engine.

    This script performs the following steps:
    1.  Loads the configuration file (`config.yaml`) and its rule tables,
        falling back to the built-in tables when no config file exists.
    2.  Loads the timed spans from the input JSON file.
    3.  Loads pre-computed token lists, or tokenizes the spans with MeCab.
    4.  Runs the segmenter over every span.
    5.  Writes the segmented lines as JSON and, optionally, as rendered text.
    """
    parser = argparse.ArgumentParser(
        description="Segment timed lyric spans into display units.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--input",
        required=True,
        help="Path to the input spans JSON file."
    )
    parser.add_argument(
        "--output",
        required=True,
        help="Path to write the output lines JSON file."
    )
    parser.add_argument(
        "--tokens",
        default=None,
        help="Path to a token-lists JSON file. When omitted, spans are tokenized with MeCab."
    )
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to the configuration YAML file."
    )
    parser.add_argument(
        "--save-tokens",
        default=None,
        help="Also write the token lists used for segmentation to this path."
    )
    parser.add_argument(
        "--text-output",
        default=None,
        help="Also write the rendered lines as plain text to this path."
    )
    parser.add_argument(
        "--dump-rules",
        default=None,
        help="Write the active rule tables as YAML to this path."
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Check the produced lines and report any issues."
    )
    parser.add_argument(
        "--progress",
        dest="show_progress",
        action="store_true",
        help="Show a progress bar over the spans."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-token rule decisions."
    )
    parser.set_defaults(show_progress=None)
    args = parser.parse_args()

    setup_logging("DEBUG" if args.verbose else "WARNING", verbose=args.verbose)

    try:
        # 1. Load configuration
        if Path(args.config).exists():
            print(f"Loading configuration from {args.config}...")
            cfg = load_config(args.config)
        else:
            print(f"Configuration {args.config} not found. Using built-in rule tables.")
            cfg = Config()

        if args.show_progress is not None:
            cfg.show_progress = args.show_progress

        if args.dump_rules:
            save_rule_tables(args.dump_rules, cfg.break_rules, cfg.whitespace_rules)
            print(f"Wrote rule tables to {args.dump_rules}")

        # 2. Load input data
        print(f"Loading spans from {args.input}...")
        spans = load_spans(args.input)

        # 3. Tokens
        if args.tokens:
            print(f"Loading tokens from {args.tokens}...")
            token_lists = load_token_lists(args.tokens)
        else:
            print("Tokenizing spans with MeCab...")
            token_lists = tokenize_spans(spans, MecabTokenizer())

        if args.save_tokens:
            save_token_lists(args.save_tokens, token_lists)
            print(f"Wrote token lists to {args.save_tokens}")

        # 4. Segment
        print("Segmenting spans...")
        lines = segment(spans, token_lists, cfg)

        # 5. Write output
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        save_lines(str(output_path), lines)
        print(f"\nSuccessfully wrote {len(lines)} lines to {args.output}")

        if args.text_output:
            text_path = Path(args.text_output)
            text_path.parent.mkdir(parents=True, exist_ok=True)
            with open(text_path, "w", encoding="utf-8") as f:
                f.write(render_lines(lines) + "\n")
            print(f"Successfully wrote rendered text to {args.text_output}")

        if args.validate:
            report = validate(lines)
            print(f"Validation found {report['issue_count']} issue(s).")
            for issue in report["issues"]:
                print(f"  [{issue['type']}] {issue['message']}")

    except (FileNotFoundError, ValueError, TypeError, KeyError, RuntimeError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
