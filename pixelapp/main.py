# pixelapp/main.py
import argparse
import logging
import os
import sys

from pixelcore.decoder import Decoder
from pixelcore.diff import count_mismatches, difference_map
from pixelcore.encoder import Encoder
from pixelcore.errors import DimensionMismatch, IndexOutOfRange, MalformedMaskFile, PixelIOError
from pixelcore.keygen import generate_secret
from pixelcore.stages import canonical_stages
from pixelio.image_io import load_pixel_buffer, save_pixel_buffer
from pixelio.mask_io import load_mask_record, save_mask_record

from . import config
from .report import print_mask_record, print_restored, print_saved, print_warnings

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

def _load_optional_records(paths):
    """Rejected or unreadable mask files become None: that restore is skipped later."""
    records = []
    for i, path in enumerate(paths, start=1):
        try:
            record = load_mask_record(path)
        except (MalformedMaskFile, PixelIOError) as e:
            logger.warning(f"M{i}: record rejected: {e}")
            records.append(None)
            continue
        print_mask_record(record, f"M{i}")
        records.append(record)
    return records


# ---------------------- commands ----------------------

def cmd_encode(args) -> int:
    if args.mask and len(args.seed) != 2:
        logger.error("--mask needs exactly two --seed values")
        return 1
    if args.seed and not args.mask:
        logger.warning("--seed given without --mask; seeds are ignored")

    source = load_pixel_buffer(args.source)
    secret = load_pixel_buffer(args.secret)
    mask = load_pixel_buffer(args.mask) if args.mask else None

    stages = canonical_stages(secret, args.rotation, mask, args.seed)
    print(f"[ENCODE] {source.width}x{source.height}, {len(stages)} stages")
    result = Encoder(stages).run(source)

    try:
        os.makedirs(args.out_dir, exist_ok=True)
    except OSError as e:
        raise PixelIOError(f"Could not create output directory {args.out_dir}: {e}") from e
    ok = True
    for label, buf in result.intermediates.items():
        path = os.path.join(args.out_dir, f"{config.INTERMEDIATE_PREFIX}{label[1:]}{config.IMAGE_EXT}")
        saved = save_pixel_buffer(buf, path)
        print_saved("ENCODE", path, saved)
        ok = ok and saved
    for i, record in enumerate(result.records, start=1):
        path = os.path.join(args.out_dir, f"M{i}.txt")
        saved = save_mask_record(record, path)
        print_saved("ENCODE", path, saved)
        print_mask_record(record, f"M{i}")
        ok = ok and saved
    return 0 if ok else 1

def cmd_decode(args) -> int:
    artifact = load_pixel_buffer(args.artifact)
    secret = load_pixel_buffer(args.secret)
    mask = load_pixel_buffer(args.mask) if args.mask else None
    if args.record and mask is None:
        logger.warning("mask records given without --mask; they are ignored")
    elif len(args.record) > 2:
        logger.warning(f"only two mask stages; ignoring {', '.join(args.record[2:])}")
        args.record = args.record[:2]

    records = _load_optional_records(args.record) if mask is not None else []
    seeds = [r.seed if r is not None else None for r in records]
    stages = canonical_stages(secret, args.rotation, mask, seeds)
    result = Decoder.from_stages(stages, records).run(artifact)

    print_warnings(result.warnings)
    for label, record, values in result.restored:
        print_restored(label, record, values)

    saved = save_pixel_buffer(result.output, args.output)
    print_saved("DECODE", args.output, saved)
    return 0 if saved else 1

def cmd_inspect(args) -> int:
    failed = 0
    for path in args.masks:
        try:
            record = load_mask_record(path)
        except (MalformedMaskFile, PixelIOError) as e:
            print(f"[MASK] {path}: {e}")
            failed += 1
            continue
        print_mask_record(record)
    return 1 if failed else 0

def cmd_keygen(args) -> int:
    secret = generate_secret(args.width, args.height, args.key)
    saved = save_pixel_buffer(secret, args.output)
    print_saved("KEYGEN", args.output, saved)
    return 0 if saved else 1

def cmd_compare(args) -> int:
    a = load_pixel_buffer(args.first)
    b = load_pixel_buffer(args.second)
    mismatches = count_mismatches(a, b)
    print(f"[COMPARE] {mismatches} of {len(a)} bytes differ")
    if args.diff_map:
        try:
            difference_map(a, b).save(args.diff_map)
        except (OSError, ValueError) as e:
            logger.error(f"Could not save difference map {args.diff_map}: {e}")
            return 1
        print_saved("COMPARE", args.diff_map, True)
    return 0 if mismatches == 0 else 1


# ---------------------- entry ----------------------

def _positive_int(text: str) -> int:
    v = int(text)
    if v <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0: {text}")
    return v


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="pixmask",
                                description="Reversible XOR / rotate / mask obfuscation of RGB images")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="run the forward pipeline")
    enc.add_argument("source", nargs="?", default=config.SOURCE_IMAGE)
    enc.add_argument("secret", nargs="?", default=config.SECRET_IMAGE)
    enc.add_argument("--mask", help="mask image applied after stage 1 and stage 2")
    enc.add_argument("--seed", type=int, action="append", default=[],
                     help="byte offset for a mask stage (give twice)")
    enc.add_argument("--out-dir", default=".")
    enc.add_argument("--rotation", type=int, default=config.ROTATION_BITS)
    enc.set_defaults(func=cmd_encode)

    dec = sub.add_parser("decode", help="replay the inverse pipeline")
    dec.add_argument("artifact", nargs="?", default=config.ARTIFACT_IMAGE)
    dec.add_argument("secret", nargs="?", default=config.SECRET_IMAGE)
    dec.add_argument("--mask", help="mask image used when encoding")
    dec.add_argument("--record", action="append", default=[],
                     help="mask text file, in forward order (M1.txt, then M2.txt)")
    dec.add_argument("--output", default=config.RESTORED_IMAGE)
    dec.add_argument("--rotation", type=int, default=config.ROTATION_BITS)
    dec.set_defaults(func=cmd_decode)

    ins = sub.add_parser("inspect", help="print the contents of mask text files")
    ins.add_argument("masks", nargs="+")
    ins.set_defaults(func=cmd_inspect)

    key = sub.add_parser("keygen", help="write a deterministic secret image")
    key.add_argument("width", type=_positive_int)
    key.add_argument("height", type=_positive_int)
    key.add_argument("key", type=int)
    key.add_argument("output", nargs="?", default=config.SECRET_IMAGE)
    key.set_defaults(func=cmd_keygen)

    cmp_ = sub.add_parser("compare", help="count differing bytes between two images")
    cmp_.add_argument("first")
    cmp_.add_argument("second")
    cmp_.add_argument("--diff-map", help="write a grayscale difference image here")
    cmp_.set_defaults(func=cmd_compare)
    return p

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)
    try:
        return args.func(args)
    except (PixelIOError, DimensionMismatch, IndexOutOfRange, MalformedMaskFile) as e:
        logger.error(str(e))
        return 1

if __name__ == "__main__":
    sys.exit(main())
