# pixelapp/report.py
# Console report lines. Everything goes through print so the report stays
# readable regardless of the logging level.
import numpy as np

def print_mask_record(record, label: str = "MASK"):
    print(f"[{label}] Seed: {record.seed}")
    print(f"[{label}] Pixels read: {len(record.triplets)}")
    for i, (r, g, b) in enumerate(record.triplets):
        print(f"Pixel {i}: ({r}, {g}, {b})")

def print_restored(label: str, record, values: np.ndarray):
    """Reconstructed region values in triplet order."""
    flat = np.asarray(values, dtype=np.uint8).reshape(-1)
    print(f"[DECODE] {label}: seed {record.seed}, {flat.size // 3} pixels restored")
    for i in range(0, flat.size - flat.size % 3, 3):
        print(f"Pixel {i // 3}: ({flat[i]}, {flat[i + 1]}, {flat[i + 2]})")

def print_saved(tag: str, path: str, ok: bool):
    print(f"[{tag}] {'saved' if ok else 'FAILED to save'} {path}")

def print_warnings(warnings):
    for w in warnings:
        print(f"[DECODE] warning: {w}")
