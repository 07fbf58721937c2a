import numpy as np
import pytest

from pixelcore.decoder import Decoder
from pixelcore.encoder import Encoder
from pixelcore.errors import DimensionMismatch, IndexOutOfRange, IrreversibleStage, MalformedMaskFile
from pixelcore.keygen import generate_secret
from pixelcore.mask import MaskRecord
from pixelcore.pixel_buffer import PixelBuffer
from pixelcore.stages import (MaskApply, MaskRestore, RotateLeft, RotateRight, ShiftLeft,
                              ShiftRight, Xor, canonical_stages)


def _filled(width, height, value):
    return PixelBuffer(width, height, np.full(width * height * 3, value, dtype=np.uint8))

def _random(width, height, key):
    return generate_secret(width, height, key)


# ---------------------- reference scenario ----------------------

def test_zero_image_with_0x0f_secret():
    source = PixelBuffer.create(2, 2)
    secret = _filled(2, 2, 0x0F)
    stages = canonical_stages(secret)

    result = Encoder(stages).run(source)
    assert list(result.intermediates) == ["P1", "P2", "P3"]
    assert (result.intermediates["P1"].data == 0x0F).all()
    assert (result.intermediates["P2"].data == 0xE1).all()
    assert (result.intermediates["P3"].data == 0xEE).all()
    assert result.output is result.intermediates["P3"]
    assert result.records == []

    decoded = Decoder.from_stages(stages).run(result.output)
    assert decoded.output == source
    assert decoded.ok

def test_encoder_leaves_source_untouched():
    source = _random(3, 3, 1)
    before = source.copy()
    Encoder(canonical_stages(_random(3, 3, 2), mask=_random(1, 1, 3), seeds=(0, 9))).run(source)
    assert source == before


# ---------------------- stage list derivation ----------------------

def test_decoder_reverses_and_inverts():
    secret = _random(2, 2, 5)
    mask = _random(1, 1, 6)
    r1 = MaskRecord(0, ((1, 2, 3),))
    r2 = MaskRecord(3, ((4, 5, 6),))
    decoder = Decoder.from_stages(canonical_stages(secret, 3, mask, (0, 3)), [r1, r2])

    kinds = [type(s) for s in decoder.stages]
    assert kinds == [Xor, MaskRestore, RotateLeft, MaskRestore, Xor]
    assert decoder.stages[1].record is r2
    assert decoder.stages[3].record is r1
    assert decoder.stages[2] == RotateLeft(3)

def test_rotation_stage_inverses():
    assert RotateRight(3).inverse() == RotateLeft(3)
    assert RotateLeft(5).inverse() == RotateRight(5)

def test_shift_stages_have_no_inverse():
    with pytest.raises(IrreversibleStage):
        ShiftLeft(1).inverse()
    with pytest.raises(IrreversibleStage):
        Decoder.from_stages([Xor(PixelBuffer.create(1, 1)), ShiftRight(2)])

def test_shift_stage_usable_forward():
    buf = _filled(1, 1, 0x81)
    assert (ShiftLeft(1).apply(buf).data == 0x02).all()


# ---------------------- masking ----------------------

def test_mask_apply_records_sum_and_substitutes_region():
    buf = PixelBuffer(2, 1, np.array([10, 20, 30, 250, 251, 252], dtype=np.uint8))
    mask = PixelBuffer(1, 1, np.array([1, 2, 10], dtype=np.uint8))
    stage = MaskApply(mask, 3)

    record = stage.capture(buf)
    assert record.seed == 3
    assert record.triplets == ((251, 253, 6),)

    out = stage.apply(buf)
    assert out.data.tolist() == [10, 20, 30, 1, 2, 10]

def test_mask_restore_wraps_around():
    buf = PixelBuffer.create(1, 1)
    mask = _filled(1, 1, 0xFF)
    record = MaskRecord(0, ((2, 2, 2),))
    out = MaskRestore(record, mask).apply(buf)
    assert (out.data == 0x03).all()

def test_mask_apply_without_seed_cannot_run_forward():
    with pytest.raises(ValueError):
        MaskApply(PixelBuffer.create(1, 1)).apply(PixelBuffer.create(2, 2))

def test_encoder_rejects_mask_outside_buffer():
    stages = canonical_stages(_random(2, 2, 1), mask=_random(1, 1, 2), seeds=(0, 10))
    with pytest.raises(IndexOutOfRange):
        Encoder(stages).run(_random(2, 2, 3))


# ---------------------- round trips ----------------------

@pytest.mark.parametrize("seeds", [(5, 30), (5, 7), (0, 42)])
def test_round_trip_with_masks(seeds):
    source = _random(4, 4, 11)
    secret = _random(4, 4, 12)
    mask = _random(2, 1, 13)
    stages = canonical_stages(secret, 3, mask, seeds)

    encoded = Encoder(stages).run(source)
    assert [r.seed for r in encoded.records] == list(seeds)
    assert all(len(r.triplets) == 2 for r in encoded.records)

    decoded = Decoder.from_stages(stages, encoded.records).run(encoded.output)
    assert decoded.ok
    assert decoded.output == source
    assert [label for label, _, _ in decoded.restored] == ["M2", "M1"]

def test_masked_artifact_needs_records():
    source = _random(4, 4, 21)
    secret = _random(4, 4, 22)
    mask = _random(2, 1, 23)
    stages = canonical_stages(secret, 3, mask, (5, 30))
    encoded = Encoder(stages).run(source)

    decoded = Decoder.from_stages(stages).run(encoded.output)
    assert len(decoded.warnings) == 2
    assert all("correction not valid" in w for w in decoded.warnings)
    assert decoded.output != source


# ---------------------- partial failure ----------------------

def test_out_of_range_record_is_skipped_and_decoding_continues():
    source = _random(4, 4, 31)
    secret = _random(4, 4, 32)
    mask = _random(2, 1, 33)
    stages = canonical_stages(secret, 3, mask, (5, 30))
    encoded = Encoder(stages).run(source)

    m1, m2 = encoded.records
    bad_m2 = MaskRecord(45, m2.triplets)  # 45 + 6 > 48
    decoded = Decoder.from_stages(stages, [m1, bad_m2]).run(encoded.output)

    assert len(decoded.warnings) == 1
    assert decoded.warnings[0].startswith("M2: correction not valid")
    assert [label for label, _, _ in decoded.restored] == ["M1"]
    # damage stays inside the region M2 should have restored
    out, want = decoded.output.data, source.data
    assert np.array_equal(out[:30], want[:30])
    assert np.array_equal(out[36:], want[36:])

def test_short_record_is_skipped():
    source = _random(4, 4, 41)
    secret = _random(4, 4, 42)
    mask = _random(2, 1, 43)
    stages = canonical_stages(secret, 3, mask, (5, 30))
    encoded = Encoder(stages).run(source)

    m1, m2 = encoded.records
    short_m1 = MaskRecord(m1.seed, m1.triplets[:1])
    decoded = Decoder.from_stages(stages, [short_m1, m2]).run(encoded.output)
    assert len(decoded.warnings) == 1
    assert decoded.warnings[0].startswith("M1: correction not valid")
    assert np.array_equal(decoded.output.data[11:], source.data[11:])

def test_restore_problem_reasons():
    buf = PixelBuffer.create(2, 2)
    mask = PixelBuffer.create(1, 1)
    assert MaskRestore(None, mask).problem(buf) == "no mask record"
    assert MaskRestore(MaskRecord(9, ((0, 0, 0),)), mask).problem(buf) is None
    assert "exceeds" in MaskRestore(MaskRecord(10, ((0, 0, 0),)), mask).problem(buf)
    assert "triplets" in MaskRestore(MaskRecord(0, ()), mask).problem(buf)
    with pytest.raises(ValueError):
        MaskRestore(None, mask).apply(buf)

def test_restore_checks_the_records_own_extent():
    buf = PixelBuffer.create(2, 2)
    mask = PixelBuffer.create(1, 1)
    # the mask part fits (9 + 3 == 12) but the record's second triplet does not
    record = MaskRecord(9, ((1, 1, 1), (2, 2, 2)))
    assert "exceeds" in MaskRestore(record, mask).problem(buf)

@pytest.mark.parametrize("seed, triplets", [
    (-3, ((1, 2, 3),)),
    (30, ((300, 1, 2), (3, 4, 5))),
    (0, ((1, -1, 2),)),
    (0, ((1, 2),)),
])
def test_record_rejected_at_construction(seed, triplets):
    with pytest.raises(MalformedMaskFile):
        MaskRecord(seed, triplets)

def test_record_outrunning_buffer_is_skipped_by_decoder():
    source = _random(4, 4, 51)
    secret = _random(4, 4, 52)
    mask = _random(2, 1, 53)
    stages = canonical_stages(secret, 3, mask, (5, 30))
    encoded = Encoder(stages).run(source)

    m1, m2 = encoded.records
    long_m2 = MaskRecord(42, m2.triplets + ((0, 0, 0),))  # 42 + 9 > 48
    decoded = Decoder.from_stages(stages, [m1, long_m2]).run(encoded.output)
    assert len(decoded.warnings) == 1
    assert decoded.warnings[0].startswith("M2: correction not valid")
    assert [label for label, _, _ in decoded.restored] == ["M1"]

def test_inverting_the_inverse_gives_the_forward_list():
    secret = _random(2, 2, 61)
    mask = _random(1, 1, 62)
    forward = canonical_stages(secret, 3, mask, (0, 6))
    r1 = MaskRecord(0, ((1, 2, 3),))
    r2 = MaskRecord(6, ((4, 5, 6),))
    again = Decoder.from_stages(Decoder.from_stages(forward, [r1, r2]).stages).stages

    assert [type(s) for s in again] == [type(s) for s in forward]
    assert [s.seed for s in again if isinstance(s, MaskApply)] == [0, 6]
    assert again[2] == RotateRight(3)


# ---------------------- fatal errors ----------------------

def test_secret_size_mismatch_is_fatal():
    stages = canonical_stages(_random(2, 2, 1))
    with pytest.raises(DimensionMismatch):
        Encoder(stages).run(_random(3, 3, 2))
    with pytest.raises(DimensionMismatch):
        Decoder.from_stages(stages).run(_random(3, 3, 2))
