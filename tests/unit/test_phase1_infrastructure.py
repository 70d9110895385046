# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Phase 1 infrastructure tests.
Covers config loading, the data models (equality, immutability,
validation), the RunStore and the PieceRepository.
No images required.
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from jigsawsolver.models.piece import EdgeFeature, EdgeType, PuzzlePiece


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _make_piece(
    piece_id: int = 0,
    puzzle_id: str = "puzzle-a",
    image_data: bytes = b"\x89PNG-fake",
    **overrides,
) -> PuzzlePiece:
    fields = dict(
        piece_id=piece_id,
        puzzle_id=puzzle_id,
        image_data=image_data,
        center_x=50.0,
        center_y=60.0,
        width=100.0,
        height=120.0,
        rotation=0.0,
        edge_type=EdgeType.INTERIOR,
        top_edge=EdgeFeature.FLAT,
        right_edge=EdgeFeature.TAB,
        bottom_edge=EdgeFeature.HOLE,
        left_edge=EdgeFeature.FLAT,
        dominant_color_r=10,
        dominant_color_g=20,
        dominant_color_b=30,
    )
    fields.update(overrides)
    return PuzzlePiece(**fields)


# ─── Config ──────────────────────────────────────────────────────────────────

def test_settings_load_defaults():
    from jigsawsolver.config import Settings
    s = Settings(_env_file=None, log_level="INFO")
    assert s.min_contour_area == 500.0
    assert s.border_margin_px == 10
    assert s.min_confidence == 30.0
    assert s.feature_workers == 1
    assert s.display_top_n == 10
    assert s.log_level == "INFO"
    # Only the in-memory store exists, so there is no backend switch
    assert "repository_backend" not in Settings.model_fields


def test_settings_env_override(monkeypatch):
    from jigsawsolver.config import Settings
    monkeypatch.setenv("MIN_CONFIDENCE", "45.5")
    monkeypatch.setenv("FEATURE_WORKERS", "4")
    s = Settings(_env_file=None)
    assert s.min_confidence == 45.5
    assert s.feature_workers == 4


def test_settings_upload_max_bytes():
    from jigsawsolver.config import Settings
    s = Settings(_env_file=None, upload_max_mb=10)
    assert s.upload_max_bytes == 10 * 1024 * 1024


def test_get_settings_is_cached():
    from jigsawsolver.config import get_settings
    assert get_settings() is get_settings()


# ─── PuzzlePiece ─────────────────────────────────────────────────────────────

def test_piece_edges_fixed_order():
    p = _make_piece()
    assert p.edges == (
        EdgeFeature.FLAT, EdgeFeature.TAB, EdgeFeature.HOLE, EdgeFeature.FLAT
    )


def test_piece_dominant_color_tuple():
    assert _make_piece().dominant_color == (10, 20, 30)


def test_piece_equality_ignores_derived_features():
    a = _make_piece(rotation=10.0, dominant_color_r=0)
    b = _make_piece(rotation=-45.0, dominant_color_r=255)
    assert a == b
    assert hash(a) == hash(b)


def test_piece_equality_requires_same_identifier():
    a = _make_piece(piece_id=0)
    b = _make_piece(piece_id=1)
    assert a != b


def test_piece_equality_requires_same_puzzle():
    assert _make_piece(puzzle_id="x") != _make_piece(puzzle_id="y")


def test_piece_equality_compares_bytes():
    a = _make_piece(image_data=b"abc")
    b = _make_piece(image_data=bytes(bytearray(b"abc")))
    c = _make_piece(image_data=b"abd")
    assert a == b
    assert a != c


def test_piece_content_key_shared_by_identical_crops():
    a = _make_piece(piece_id=0)
    b = _make_piece(piece_id=7)
    assert a != b
    assert a.content_key() == b.content_key()


def test_piece_is_immutable():
    p = _make_piece()
    with pytest.raises(ValidationError):
        p.rotation = 5.0


@pytest.mark.parametrize("rotation", [-90.0, -120.0, 90.5])
def test_piece_rotation_out_of_range_rejected(rotation):
    with pytest.raises(ValidationError):
        _make_piece(rotation=rotation)


def test_piece_rotation_upper_bound_inclusive():
    assert _make_piece(rotation=90.0).rotation == 90.0


@pytest.mark.parametrize("channel", [-1, 256])
def test_piece_color_out_of_range_rejected(channel):
    with pytest.raises(ValidationError):
        _make_piece(dominant_color_g=channel)


def test_piece_summary_omits_image_bytes():
    from jigsawsolver.models.piece import piece_summary
    summary = piece_summary(_make_piece(image_data=b"12345"))
    assert "image_data" not in summary
    assert summary["image_bytes"] == 5
    assert summary["edge_type"] == "interior"
    assert summary["top_edge"] == "flat"


# ─── InMemoryRunStore ────────────────────────────────────────────────────────

def test_run_store_create_and_get():
    from jigsawsolver.core.run_store import InMemoryRunStore
    from jigsawsolver.models.run import RunStatus

    store = InMemoryRunStore()
    run = store.create_run("puzzle-a", generation=1)

    assert run.status == RunStatus.QUEUED
    fetched = store.get_run(run.run_id)
    assert fetched is not None
    assert fetched.puzzle_id == "puzzle-a"
    assert fetched.generation == 1


def test_run_store_update():
    from jigsawsolver.core.run_store import InMemoryRunStore
    from jigsawsolver.models.run import RunStatus

    store = InMemoryRunStore()
    run = store.create_run("p", 1)
    store.update_run(run.run_id, status=RunStatus.ANALYZING)

    updated = store.get_run(run.run_id)
    assert updated.status == RunStatus.ANALYZING
    assert updated.updated_at >= run.updated_at


def test_run_store_get_returns_copy():
    from jigsawsolver.core.run_store import InMemoryRunStore
    from jigsawsolver.models.run import RunStatus

    store = InMemoryRunStore()
    run = store.create_run("p", 1)
    snapshot = store.get_run(run.run_id)
    snapshot.status = RunStatus.FAILED
    assert store.get_run(run.run_id).status == RunStatus.QUEUED


def test_run_store_fail():
    from jigsawsolver.core.run_store import InMemoryRunStore
    from jigsawsolver.models.run import RunStatus

    store = InMemoryRunStore()
    run = store.create_run("p", 1)
    store.fail_run(run.run_id, "something went wrong")

    failed = store.get_run(run.run_id)
    assert failed.status == RunStatus.FAILED
    assert failed.error == "something went wrong"
    assert failed.is_terminal


def test_run_store_update_unknown_is_noop():
    from jigsawsolver.core.run_store import InMemoryRunStore
    from jigsawsolver.models.run import RunStatus

    store = InMemoryRunStore()
    store.update_run("does-not-exist", status=RunStatus.FAILED)
    assert store.get_run("does-not-exist") is None


def test_run_store_latest_by_generation():
    from jigsawsolver.core.run_store import InMemoryRunStore

    store = InMemoryRunStore()
    assert store.latest_run() is None
    store.create_run("p", 2)
    newest = store.create_run("p", 3)
    store.create_run("p", 1)
    assert store.latest_run().run_id == newest.run_id


def test_run_store_count():
    from jigsawsolver.core.run_store import InMemoryRunStore

    store = InMemoryRunStore()
    assert store.count() == 0
    store.create_run("p", 1)
    store.create_run("p", 2)
    assert store.count() == 2


def test_status_response_includes_result_summary():
    from jigsawsolver.models.run import (
        AnalysisResult, AnalysisRun, AnalysisStatus, RunStatus,
    )
    pieces = (_make_piece(0, image_data=b"a"), _make_piece(1, image_data=b"b"))
    run = AnalysisRun(
        run_id="r1",
        puzzle_id="puzzle-a",
        status=RunStatus.SUCCESS,
        result=AnalysisResult(
            puzzle_id="puzzle-a", status=AnalysisStatus.SUCCESS, pieces=pieces
        ),
    )
    resp = run.to_status_response()
    assert resp["status"] == "success"
    assert resp["piece_count"] == 2
    assert resp["match_count"] == 0
    assert [p["piece_id"] for p in resp["pieces"]] == [0, 1]


# ─── InMemoryPieceRepository ─────────────────────────────────────────────────

def test_repository_insert_and_get():
    from jigsawsolver.core.piece_repository import InMemoryPieceRepository

    repo = InMemoryPieceRepository()
    stored = repo.insert_pieces([
        _make_piece(0, image_data=b"a"),
        _make_piece(1, image_data=b"b"),
    ])
    assert stored == 2
    assert [p.piece_id for p in repo.get_pieces("puzzle-a")] == [0, 1]
    assert repo.get_piece("puzzle-a", 1).image_data == b"b"
    assert repo.get_piece("puzzle-a", 9) is None


def test_repository_replaces_on_same_key():
    from jigsawsolver.core.piece_repository import InMemoryPieceRepository

    repo = InMemoryPieceRepository()
    repo.insert_pieces([_make_piece(0, image_data=b"old")])
    repo.insert_pieces([_make_piece(0, image_data=b"new")])
    pieces = repo.get_pieces("puzzle-a")
    assert len(pieces) == 1
    assert pieces[0].image_data == b"new"


def test_repository_dedupes_identical_content_in_batch():
    from jigsawsolver.core.piece_repository import InMemoryPieceRepository

    repo = InMemoryPieceRepository()
    stored = repo.insert_pieces([
        _make_piece(0, image_data=b"same"),
        _make_piece(1, image_data=b"same"),
    ])
    assert stored == 1
    assert [p.piece_id for p in repo.get_pieces("puzzle-a")] == [0]


def test_repository_orders_by_timestamp():
    from jigsawsolver.core.piece_repository import InMemoryPieceRepository

    t0 = datetime(2026, 1, 1, tzinfo=timezone.utc)
    repo = InMemoryPieceRepository()
    repo.insert_pieces([
        _make_piece(0, image_data=b"a", timestamp=t0 + timedelta(seconds=5)),
        _make_piece(1, image_data=b"b", timestamp=t0),
    ])
    assert [p.piece_id for p in repo.get_pieces("puzzle-a")] == [1, 0]
    assert [p.piece_id for p in repo.all_pieces()] == [0, 1]


def test_repository_delete_piece():
    from jigsawsolver.core.piece_repository import InMemoryPieceRepository

    repo = InMemoryPieceRepository()
    piece = _make_piece(0)
    repo.insert_pieces([piece])
    assert repo.delete_piece(piece) is True
    assert repo.delete_piece(piece) is False
    assert repo.get_pieces("puzzle-a") == []


def test_repository_delete_puzzle():
    from jigsawsolver.core.piece_repository import InMemoryPieceRepository

    repo = InMemoryPieceRepository()
    repo.insert_pieces([
        _make_piece(0, puzzle_id="a", image_data=b"1"),
        _make_piece(1, puzzle_id="a", image_data=b"2"),
        _make_piece(0, puzzle_id="b", image_data=b"3"),
    ])
    assert sorted(repo.puzzle_ids()) == ["a", "b"]
    assert repo.delete_puzzle("a") == 2
    assert repo.get_pieces("a") == []
    assert len(repo.get_pieces("b")) == 1
    assert repo.delete_puzzle("a") == 0


# ─── Logger ──────────────────────────────────────────────────────────────────

def test_get_logger_returns_bound_logger():
    from jigsawsolver.utils.logger import configure_logging, get_logger
    configure_logging()
    log = get_logger("test")
    # Must not raise with structured kwargs
    log.info("test_event", stage="unit", count=1)


def test_log_processor_coerces_numpy_values():
    import numpy as np
    from jigsawsolver.utils.logger import _coerce_numpy
    event = _coerce_numpy(None, "info", {
        "event": "contours_extracted",
        "area": np.float64(501.5),
        "count": np.int32(3),
        "shape": (np.int64(200), 300, 3),
        "centroid": np.array([1.5, 2.5]),
    })
    assert event["area"] == 501.5 and type(event["area"]) is float
    assert type(event["count"]) is int
    assert event["shape"] == [200, 300, 3]
    assert event["centroid"] == [1.5, 2.5]
