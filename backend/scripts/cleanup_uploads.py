"""Cleanup orphaned uploads.

Usage:
  python scripts/cleanup_uploads.py            # preview only
  python scripts/cleanup_uploads.py --apply    # delete orphaned files
"""
import argparse
import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from backoffice.services.cleanup_service import cleanup_service


def _print_preview(preview):
    print("Orphaned upload preview")
    print(f"  uploads_directory: {cleanup_service.upload_dir}")
    print(f"  total_files_in_uploads: {preview.total_files_in_uploads}")
    print(f"  referenced_files: {preview.referenced_files}")
    print(f"  orphaned_files: {preview.orphaned_files}")
    print(f"  estimated_space_saved: {preview.estimated_space_saved} bytes")
    if preview.orphaned_file_list:
        print("  orphaned_file_list:")
        for filename in preview.orphaned_file_list:
            print(f"    - {filename}")


def _print_result(result):
    if result is None:
        print("Cleanup did not complete; see logs for details.")
        return 1
    print("Orphaned upload cleanup result")
    print(f"  orphan_count: {result.orphan_count}")
    print(f"  deleted_count: {result.deleted_count}")
    print(f"  duration_ms: {result.duration_ms}")
    if result.errors:
        print("  errors:")
        for item in result.errors:
            print(f"    - {item['filename']}: {item['error']}")
    return 0


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Actually delete orphaned files")
    args = parser.parse_args()

    if not args.apply:
        _print_preview(asyncio.run(cleanup_service.preview()))
        return 0
    return _print_result(asyncio.run(cleanup_service.manual_cleanup()))


if __name__ == "__main__":
    sys.exit(main())
