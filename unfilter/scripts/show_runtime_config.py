import json

from unfilter.config import load_settings
from unfilter.controllers.translate_controller import debug_report


def main():
    settings = load_settings()
    print(json.dumps(debug_report(settings), indent=2))
    missing = settings.missing_required()
    if missing:
        print("missing:", ", ".join(missing))

if __name__ == "__main__":
    main()
