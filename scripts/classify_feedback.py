import json
import sys

from core.feedback.classify import classify_feedback, extract_feedback_parameters


def main():
    if len(sys.argv) < 2:
        print('Usage: python scripts/classify_feedback.py "make it bigger and add a hole"')
        return
    text = " ".join(sys.argv[1:])
    params = extract_feedback_parameters(text)
    print(json.dumps({
        "type": classify_feedback(text),
        "extractedParameters": params.to_dict() if params else None,
    }, indent=2))


if __name__ == "__main__":
    main()
