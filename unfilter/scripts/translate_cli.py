import argparse
import json
import sys

from unfilter.config import load_settings
from unfilter.services.errors import ConfigurationError, RelayError
from unfilter.services.pipeline_service import parse_phrase
from unfilter.services.record_service import RecordService
from unfilter.services.translation_service import translate_phrase


def main() -> None:
    parser = argparse.ArgumentParser(description="Translate one corporate phrase without running the server.")
    parser.add_argument("--phrase", required=True)
    parser.add_argument("--tone", default=None, help="sarcastic or blunt; defaults to the configured tone")
    parser.add_argument("--model", default=None, help="defaults to the configured model")
    parser.add_argument("--no-store", action="store_true", help="skip the Airtable write")
    args = parser.parse_args()

    settings = load_settings()
    model = args.model or settings.model
    result = {"phrase": args.phrase}
    try:
        phrase = parse_phrase({"phrase": args.phrase}, max_length=settings.max_phrase_length)
        if not args.no_store and settings.missing_required():
            raise ConfigurationError(f"Missing env vars: {', '.join(settings.missing_required())}")
        result["translation"] = translate_phrase(phrase, model=model, tone=args.tone)
        result["model"] = model
        if not args.no_store:
            result["store"] = RecordService().add_record(phrase, result["translation"], model).to_payload()
    except RelayError as e:
        result.update(e.to_payload())
        sys.stdout.write(json.dumps(result, ensure_ascii=False, indent=2) + "\n")
        sys.exit(1)

    sys.stdout.write(json.dumps(result, ensure_ascii=False, indent=2))
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()
