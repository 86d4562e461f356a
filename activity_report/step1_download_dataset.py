"""
Step 1: Dataset Download

This module fetches the compressed activity dataset from its fixed URL and
extracts the activity CSV. Both stages are skipped when their output already
exists, so the step can be re-run offline once the data is in place.
"""

from __future__ import annotations
import zipfile
from pathlib import Path
from urllib.request import urlretrieve

from .config import Step1Config
from .utils import ensure_dir


def download_dataset(url: str, archive_path: Path, force: bool = False) -> Path:
    """
    Download the dataset archive unless it is already present.

    Args:
        url: Archive URL
        archive_path: Local path of the downloaded archive
        force: Re-download even if the archive exists

    Returns:
        Path to the archive
    """
    if archive_path.exists() and not force:
        print(f"  Archive already exists at {archive_path}, skipping download.")
        return archive_path

    ensure_dir(archive_path.parent)
    print(f"  Downloading {url}")
    print(f"    -> {archive_path}")
    tmp_path = archive_path.with_suffix(archive_path.suffix + ".part")
    try:
        urlretrieve(url, tmp_path)
        tmp_path.replace(archive_path)
    finally:
        tmp_path.unlink(missing_ok=True)
    print("  Download complete.")

    return archive_path


def extract_dataset(archive_path: Path, extract_dir: Path, csv_name: str) -> Path:
    """
    Extract the activity CSV from the dataset archive.

    Args:
        archive_path: Path to the zip archive
        extract_dir: Directory to extract into
        csv_name: Name of the CSV member inside the archive

    Returns:
        Path to the extracted CSV

    Raises:
        FileNotFoundError: If the archive is missing or lacks the CSV member
        ValueError: If the archive is not a valid zip file
    """
    if not archive_path.exists():
        raise FileNotFoundError(f"Archive not found: {archive_path}")

    ensure_dir(extract_dir)

    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            members = {Path(name).name: name for name in zf.namelist()}
            if csv_name not in members:
                raise FileNotFoundError(
                    f"{csv_name} not found in {archive_path} (members: {sorted(members)})"
                )
            member = members[csv_name]
            csv_path = extract_dir / csv_name
            with zf.open(member) as src, open(csv_path, "wb") as dst:
                dst.write(src.read())
    except zipfile.BadZipFile as e:
        raise ValueError(f"Corrupt dataset archive {archive_path}: {e}") from e

    print(f"  Extracted: {csv_path}")
    return csv_path


def run_step1(cfg: Step1Config) -> Path:
    """
    Execute Step 1: Download and extract the activity dataset.

    This step:
    1. Returns early if the activity CSV is already in cfg.outdir
    2. Downloads the zip archive from cfg.url (skipped if present)
    3. Extracts the activity CSV into cfg.outdir

    Args:
        cfg: Step1Config with URL, output directory and file names

    Returns:
        Path to the extracted activity CSV
    """
    print("\n" + "=" * 70)
    print("STEP 1: Dataset Download")
    print("=" * 70)

    ensure_dir(cfg.outdir)

    archive_path = cfg.outdir / cfg.archive_name
    csv_path = cfg.outdir / cfg.csv_name

    if csv_path.exists() and not cfg.force_download:
        print(f"\n  {csv_path} already exists, skipping download and extraction.")
    else:
        print("\nFetching archive...")
        download_dataset(cfg.url, archive_path, force=cfg.force_download)

        print("\nExtracting dataset...")
        csv_path = extract_dataset(archive_path, cfg.outdir, cfg.csv_name)

    print("\n" + "=" * 70)
    print("STEP 1 COMPLETED")
    print("=" * 70)

    return csv_path


def main():
    """
    Example usage of Step 1.

    Downloads the dataset into data/ under the current directory.
    """
    config = Step1Config(outdir=Path("data"))
    csv_path = run_step1(config)
    return csv_path


if __name__ == "__main__":
    main()
