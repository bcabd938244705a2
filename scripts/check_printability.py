import json
import sys

from core.printability.rules import analyze_model_printability, analyze_stl_printability

USAGE = (
    "Usage:\n"
    "  python scripts/check_printability.py model vertices=50000 file_size=1000000\n"
    "  python scripts/check_printability.py stl vertices=5000 faces=200 volume_cm3=0.5"
)


def parse_stats(args):
    stats = {}
    for arg in args:
        key, _, value = arg.partition("=")
        stats[key] = float(value)
    return stats


def main():
    if len(sys.argv) < 2 or sys.argv[1] not in ("model", "stl"):
        print(USAGE)
        return
    try:
        stats = parse_stats(sys.argv[2:])
    except ValueError:
        print(USAGE)
        sys.exit(1)

    if sys.argv[1] == "model":
        verdict = analyze_model_printability(stats.get("vertices", 0), stats.get("file_size", 0))
    else:
        verdict = analyze_stl_printability(stats.get("vertices", 0), stats.get("faces", 0), stats.get("volume_cm3", 0))
    print(json.dumps(verdict.to_dict(), indent=2))


if __name__ == "__main__":
    main()
