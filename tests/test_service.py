"""Tests for discovery, bracket pre-pass and sequential/pool execution."""

import logging
import threading
from pathlib import Path

import pytest

from ps_app.core.config import Settings
from ps_app.modules.photosort import service as service_mod
from ps_app.modules.photosort.analysis.bracketed import BracketExif
from ps_app.modules.photosort.schemas import ActionKind, MoveItem
from ps_app.modules.photosort.service import (
    PoolContext,
    SequentialContext,
    SortService,
)


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(path.name.encode())
    return path


def _tree(root: Path) -> list[str]:
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())


@pytest.fixture
def svc() -> SortService:
    return SortService(Settings())


class TestFindFiles:
    def test_sorted_and_flat_by_default(self, source_dir):
        for name in ("c.jpg", "a.jpg", "b.jpg"):
            _touch(source_dir / name)
        _touch(source_dir / "sub" / "d.jpg")

        files = SortService.find_files([source_dir], recursive=False)
        assert [f.name for f in files] == ["a.jpg", "b.jpg", "c.jpg"]

    def test_recursive_is_depth_first(self, source_dir):
        _touch(source_dir / "a.jpg")
        _touch(source_dir / "b" / "x.jpg")
        _touch(source_dir / "b" / "y" / "z.jpg")
        _touch(source_dir / "c.jpg")

        files = SortService.find_files([source_dir], recursive=True)
        rel = [f.relative_to(source_dir).as_posix() for f in files]
        assert rel == ["a.jpg", "b/x.jpg", "b/y/z.jpg", "c.jpg"]

    def test_unreadable_folder_is_logged_and_skipped(self, tmp_path, caplog):
        caplog.set_level(logging.ERROR)
        files = SortService.find_files([tmp_path / "missing"], recursive=True)
        assert files == []
        assert "Error processing folder" in caplog.text


class TestContexts:
    def test_failure_is_recorded_and_batch_continues(self, caplog):
        def job(path, bracket):
            if path.name == "bad.jpg":
                raise RuntimeError("kaput")
            return MoveItem(src=str(path), dst="x", action="copy", ok=True)

        ctx = SequentialContext(job, ActionKind.copy)
        for name in ("a.jpg", "bad.jpg", "c.jpg"):
            ctx.submit(Path(name))
        items = ctx.drain()

        assert [i.ok for i in items] == [True, False, True]
        assert items[1].reason == "kaput"
        assert "Error processing file" in caplog.text

    def test_pool_returns_items_in_submission_order(self):
        seen_threads = set()

        def job(path, bracket):
            seen_threads.add(threading.current_thread().name)
            return MoveItem(src=str(path), dst=None, action="copy", ok=True)

        ctx = PoolContext(job, ActionKind.copy, threads=4)
        try:
            for i in range(20):
                ctx.submit(Path(f"{i:02d}.jpg"))
            items = ctx.drain(timeout=10)
        finally:
            ctx.close()

        assert [i.src for i in items] == [f"{i:02d}.jpg" for i in range(20)]
        assert ctx.completed == ctx.submitted == 20
        assert all(name.startswith("ps-worker") for name in seen_threads)

    def test_drain_timeout_logs_mismatch(self, caplog):
        release = threading.Event()

        def job(path, bracket):
            release.wait(5)
            return MoveItem(src=str(path), dst=None, action="copy", ok=True)

        ctx = PoolContext(job, ActionKind.copy, threads=1)
        try:
            ctx.submit(Path("slow.jpg"))
            items = ctx.drain(timeout=0.05)
        finally:
            release.set()
            ctx.close()

        assert items == []
        assert ctx.completed == 0
        assert "Not all jobs completed" in caplog.text


class TestSortService:
    @pytest.fixture
    def files(self, source_dir):
        return [
            _touch(source_dir / "IMG_20230101_a.jpg"),
            _touch(source_dir / "IMG_20230102_b.jpg"),
            _touch(source_dir / "notes.txt"),
            _touch(source_dir / "20230103_c.mp4"),
        ]

    def _request(self, make_request, **kw):
        return make_request(
            analysis_mode="only_name",
            file_format="{date?%Y%m%d}_{name}.{ext}",
            **kw,
        )

    def test_plan_does_not_touch_files(self, svc, make_request, files, target_dir):
        resp = svc.plan(self._request(make_request))

        assert resp.dry_run is True
        assert resp.files_count == 4
        assert resp.processed_count == 3
        assert resp.failed_count == 1
        assert [Path(i.src).name for i in resp.items] == sorted(f.name for f in files)
        assert list(target_dir.iterdir()) == []

    def test_apply_copies(self, svc, make_request, files, target_dir):
        resp = svc.apply(self._request(make_request))

        names = sorted(p.name for p in target_dir.iterdir())
        assert names == ["20230101_a.jpg", "20230102_b.jpg", "20230103_c.mp4"]
        assert resp.dry_run is False
        assert all(f.exists() for f in files)

    def test_pool_matches_sequential(self, svc, make_request, files):
        sequential = svc.plan(self._request(make_request))
        pooled = svc.plan(self._request(make_request, threads=3))
        assert [(i.src, i.dst, i.ok) for i in pooled.items] == [
            (i.src, i.dst, i.ok) for i in sequential.items
        ]

    def test_reporter_sees_every_phase(self, svc, make_request, files):
        calls: list[tuple[str, str]] = []

        class Recorder:
            def start(self, phase, total=None, text=None):
                calls.append(("start", phase))

            def update(self, phase, advance=1, text=None):
                calls.append(("update", phase))

            def end(self, phase):
                calls.append(("end", phase))

        svc.plan(self._request(make_request), reporter=Recorder())

        assert [c for c in calls if c[0] != "update"] == [
            ("start", "scan"),
            ("end", "scan"),
            ("start", "dispatch"),
            ("end", "dispatch"),
            ("start", "drain"),
            ("end", "drain"),
        ]
        assert calls.count(("update", "dispatch")) == len(files)
        assert calls.count(("update", "drain")) == len(files)

    def test_colliding_names_get_counters(
        self, svc, make_request, source_dir, target_dir
    ):
        _touch(source_dir / "a" / "IMG_20230101_x.jpg")
        _touch(source_dir / "b" / "IMG_20230101_x.jpg")
        _touch(source_dir / "c" / "IMG_20230101_x.jpg")
        req = make_request(
            analysis_mode="only_name",
            file_format="{date?%Y}_{name}{-:dup}.{ext}",
            recursive=True,
        )

        resp = svc.apply(req)

        assert resp.processed_count == 3
        names = sorted(p.name for p in target_dir.iterdir())
        assert names == ["2023_x-1.jpg", "2023_x-2.jpg", "2023_x.jpg"]

    def test_config_error_propagates(self, svc, make_request, tmp_path):
        from ps_app.core.errors import ConfigError

        with pytest.raises(ConfigError):
            svc.plan(make_request(target_dir=str(tmp_path / "nope")))


class TestBracketMode:
    @pytest.fixture
    def detect(self, monkeypatch):
        """Bracket indices keyed by file name; missing names are not bracketed."""
        indices: dict[str, int] = {}
        inspected: list[str] = []

        def _info(path):
            inspected.append(path.name)
            index = indices.get(path.name)
            return BracketExif(index) if index else None

        monkeypatch.setattr(service_mod, "bracket_info", _info)
        return indices, inspected

    @pytest.mark.parametrize("threads", [None, 2])
    def test_groups_are_rendered_with_bracket_template(
        self, svc, make_request, source_dir, target_dir, detect, threads
    ):
        indices, inspected = detect
        for name, index in [("A1.jpg", 1), ("A2.jpg", 2), ("A3.jpg", 3), ("B1.jpg", 1)]:
            _touch(source_dir / name)
            indices[name] = index
        _touch(source_dir / "C.jpg")
        _touch(source_dir / "D.mp4")

        req = make_request(
            analysis_mode="only_name",
            file_format="single/{name}.{ext}",
            bracketed_file_format=(
                "brk/{bracket?num}-{bracket?seq}of{bracket?len}-{bracket?first}.{ext}"
            ),
            mkdir=True,
            threads=threads,
        )
        resp = svc.apply(req)

        assert resp.bracket_groups == 2
        got = _tree(target_dir)
        assert got == [
            "brk/0-1of3-A1.jpg",
            "brk/0-2of3-A1.jpg",
            "brk/0-3of3-A1.jpg",
            "brk/1-1of1-B1.jpg",
            "single/C.jpg",
            "single/D.mp4",
        ]
        # videos are never inspected for maker notes
        assert "D.mp4" not in inspected

    def test_detection_error_flushes_and_continues(
        self, svc, make_request, source_dir, target_dir, monkeypatch, caplog
    ):
        from ps_app.core.errors import AnalysisError

        def _info(path):
            if path.name == "B.jpg":
                raise AnalysisError("corrupt maker note")
            return BracketExif(1 if path.name == "A.jpg" else 2)

        monkeypatch.setattr(service_mod, "bracket_info", _info)
        for name in ("A.jpg", "B.jpg", "C.jpg"):
            _touch(source_dir / name)

        req = make_request(
            analysis_mode="only_name",
            file_format="single/{name}.{ext}",
            bracketed_file_format="brk/{bracket?num}-{name}.{ext}",
            mkdir=True,
        )
        resp = svc.apply(req)

        # B interrupts A's sequence, so C (index 2) starts a new group
        assert resp.bracket_groups == 2
        got = _tree(target_dir)
        assert got == ["brk/0-A.jpg", "brk/1-C.jpg", "single/B.jpg"]
        assert "corrupt maker note" in caplog.text

    def test_oversized_photo_does_not_abort_the_batch(
        self, svc, make_request, source_dir, target_dir, make_huge_png, caplog
    ):
        make_huge_png(source_dir / "a.png")
        _touch(source_dir / "b.jpg")

        req = make_request(
            analysis_mode="exif_then_name",
            file_format="single/{name}.{ext}",
            bracketed_file_format="brk/{bracket?num}-{name}.{ext}",
            mkdir=True,
        )
        resp = svc.apply(req)

        assert resp.files_count == 2
        assert resp.failed_count == 0
        assert resp.bracket_groups == 0
        assert _tree(target_dir) == ["single/a.png", "single/b.jpg"]
        assert "exceeds limit" in caplog.text
