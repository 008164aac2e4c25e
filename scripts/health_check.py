#!/usr/bin/env python3
"""Stock Radar configuration health check."""

import os
import sys

# Add project to path
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from config import settings

REQUIRED_TEMPLATES = ["base.html", "login.html", "profile.html", "dashboard.html", "platform_detail.html"]


def check_configuration():
    """Report which analysis mode is active."""
    print("\n🔑 Configuration")
    print("=" * 70)

    if settings.USE_MOCK_DATA:
        print("  ✓ Mock mode enabled (STOCKRADAR_MOCK); no API calls are made.")
        return True

    if settings.API_KEY:
        print(f"  ✓ API key configured ({len(settings.API_KEY)} chars)")
        print(f"    analysis model: {settings.ANALYSIS_MODEL}")
        print(f"    report model:   {settings.REPORT_MODEL}")
        print(f"    image model:    {settings.IMAGE_MODEL}")
        return True

    print("  ✗ No GEMINI_API_KEY / API_KEY set; every search will report unavailable.")
    return False


def check_templates(template_dir=None):
    """Check that every screen template is present."""
    print("\n🖼  Templates")
    print("=" * 70)

    template_dir = template_dir or os.path.join(BASE_DIR, "ui", "templates")
    missing = [name for name in REQUIRED_TEMPLATES if not os.path.exists(os.path.join(template_dir, name))]
    if missing:
        for name in missing:
            print(f"  ✗ Missing {name}")
        return False

    print(f"  ✓ All {len(REQUIRED_TEMPLATES)} templates present")
    return True


def check_logs(log_file=None):
    """Show recent log entries and flag errors."""
    print("\n📋 Recent Log Entries (last 10)")
    print("=" * 70)

    log_file = log_file or os.path.join(settings.LOGS_DIR, "ui.log")
    if not os.path.exists(log_file):
        print("  No log file found yet.")
        return True

    try:
        with open(log_file, "r", encoding="utf-8") as f:
            lines = f.readlines()[-10:]
    except OSError as e:
        print(f"  Error reading logs: {e}")
        return False

    for line in lines:
        print(f"  {line.rstrip()}")

    return not any("| ERROR |" in line for line in lines)


def main():
    """Run all checks."""
    print("\n" + "=" * 70)
    print("  Stock Radar Health Check")
    print("=" * 70)

    checks = [
        ("Configuration", check_configuration),
        ("Templates", check_templates),
        ("Log Health", check_logs),
    ]

    all_pass = True
    for name, check_func in checks:
        try:
            if not check_func():
                all_pass = False
        except Exception as e:
            print(f"\n❌ {name} check failed: {e}")
            all_pass = False

    print("\n" + "=" * 70)
    if all_pass:
        print("✓ All checks passed. Stock Radar is ready.")
    else:
        print("⚠ Some checks failed. Review above for details.")
    print("=" * 70 + "\n")

    return 0 if all_pass else 1


if __name__ == "__main__":
    sys.exit(main())
