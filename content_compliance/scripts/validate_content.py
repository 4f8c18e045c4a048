"""
CLI to validate a content file against one compliance domain.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from content_compliance.config.domains import DOMAINS, TGA_THERAPEUTIC
from content_compliance.services.engine import ComplianceEngine
from content_compliance.services.formatter import serialize_result
from content_compliance.services.types import (
    ContentType,
    Platform,
    RequestFlags,
    Specialty,
    TargetAudience,
    ValidationRequest,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Score marketing content for regulatory compliance.")
    parser.add_argument("path", type=Path, help="UTF-8 text file to validate ('-' reads stdin).")
    parser.add_argument(
        "--domain",
        choices=sorted(DOMAINS),
        default=TGA_THERAPEUTIC,
        help="Rule domain to evaluate against.",
    )
    parser.add_argument(
        "--content-type",
        choices=[item.value for item in ContentType],
        default=ContentType.BLOG_POST.value,
    )
    parser.add_argument(
        "--specialty",
        choices=[item.value for item in Specialty],
        default=Specialty.GP.value,
    )
    parser.add_argument(
        "--audience",
        choices=[item.value for item in TargetAudience],
        default=TargetAudience.GENERAL_PUBLIC.value,
    )
    parser.add_argument(
        "--platform",
        choices=[item.value for item in Platform],
        default=Platform.WEBSITE.value,
    )
    parser.add_argument("--medical-claims", action="store_true", help="Content includes medical claims.")
    parser.add_argument("--medications", action="store_true", help="Content mentions medications.")
    parser.add_argument("--device-claims", action="store_true", help="Content includes device claims.")
    parser.add_argument(
        "--audit-log",
        type=Path,
        default=None,
        help="Optional JSONL audit path (ignored when Supabase is configured).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = parse_args(argv)

    if str(args.path) == "-":
        content = sys.stdin.read()
    else:
        content = args.path.read_bytes()

    # Hosted rules are fetched by from_env when Supabase is configured.
    engine = ComplianceEngine.from_env(args.domain, audit_log_path=args.audit_log)

    request = ValidationRequest(
        content=content,
        content_type=ContentType(args.content_type),
        specialty=Specialty(args.specialty),
        target_audience=TargetAudience(args.audience),
        platform=Platform(args.platform),
        flags=RequestFlags(
            includes_medical_claims=args.medical_claims,
            mentions_medications=args.medications,
            includes_device_claims=args.device_claims,
        ),
        actor_id="cli",
    )
    result = engine.validate(request)
    if engine.audit is not None:
        engine.audit.close()

    print(json.dumps(serialize_result(result), ensure_ascii=False, indent=2))
    return 0 if result.is_compliant else 1


if __name__ == "__main__":
    sys.exit(main())
