"""Tests for the output merger."""

from pathlib import Path

import pytest

from corpus_snapshot.core.exceptions import ConfigurationError
from corpus_snapshot.core.models.output import DatedOutputFile
from corpus_snapshot.merging.merger import OutputMerger

MB = 1024 * 1024


def write(path: Path, size: int, fill: bytes = b"x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes((fill * size)[:size])
    return path


def merged_files(merge_dir: Path) -> list[str]:
    return sorted(p.name for p in merge_dir.glob("merged_*.txt"))


@pytest.mark.unit
class TestCollectInputs:
    """Tests for input discovery and ordering."""

    def test_matches_dated_pattern_only(self, output_root: Path) -> None:
        write(output_root / "repo" / "260110_a.txt", 1)
        write(output_root / "repo" / "260110_.txt", 1)
        write(output_root / "repo" / "26011_a.txt", 1)
        write(output_root / "repo" / "2601100_a.txt", 1)
        write(output_root / "repo" / "260110-a.txt", 1)
        write(output_root / "repo" / "260110_a.md", 1)
        write(output_root / "repo" / "notes.txt", 1)

        inputs = OutputMerger().collect_inputs(output_root, output_root / "merged")

        assert [f.path.name for f in inputs] == ["260110_.txt", "260110_a.txt"]

    def test_excludes_merge_dir(self, output_root: Path) -> None:
        write(output_root / "merged" / "260110_inside.txt", 1)
        write(output_root / "merged" / "sub" / "260110_deeper.txt", 1)
        write(output_root / "repo" / "260110_outside.txt", 1)

        inputs = OutputMerger().collect_inputs(output_root, output_root / "merged")

        assert [f.path.name for f in inputs] == ["260110_outside.txt"]

    def test_byte_wise_path_order(self, output_root: Path) -> None:
        for relative in [
            "b/260101_x.txt",
            "a/260102_x.txt",
            "a/260101_y.txt",
            "B/260101_x.txt",
            "a/260101_X.txt",
            "a-b/260101_x.txt",
        ]:
            write(output_root / relative, 1)

        inputs = OutputMerger().collect_inputs(output_root, output_root / "merged")

        relative = [str(f.path.relative_to(output_root.resolve())) for f in inputs]
        assert relative == [
            "B/260101_x.txt",
            "a-b/260101_x.txt",
            "a/260101_X.txt",
            "a/260101_y.txt",
            "a/260102_x.txt",
            "b/260101_x.txt",
        ]

    def test_skips_symlinked_files(self, output_root: Path, tmp_path: Path) -> None:
        target = write(tmp_path / "elsewhere" / "260101_real.txt", 3)
        (output_root / "repo").mkdir()
        (output_root / "repo" / "260101_link.txt").symlink_to(target)

        assert OutputMerger().collect_inputs(output_root, output_root / "merged") == []


@pytest.mark.unit
class TestPlan:
    """Tests for batch assignment."""

    def _files(self, tmp_path: Path, sizes: list[int]) -> list[DatedOutputFile]:
        return [
            DatedOutputFile(path=tmp_path / f"2601{i:02d}_f.txt", size_bytes=size)
            for i, size in enumerate(sizes, 1)
        ]

    def test_new_batch_before_overflowing_file(self, tmp_path: Path) -> None:
        batches = OutputMerger(8 * MB).plan(self._files(tmp_path, [5 * MB, 4 * MB, 2 * MB]), tmp_path)

        assert [b.index for b in batches] == [1, 2]
        assert [b.size_bytes for b in batches] == [5 * MB, 6 * MB]
        assert [len(b.sources) for b in batches] == [1, 2]

    def test_exact_fit_stays_in_batch(self, tmp_path: Path) -> None:
        batches = OutputMerger(10).plan(self._files(tmp_path, [4, 6, 1]), tmp_path)
        assert [b.size_bytes for b in batches] == [10, 1]

    def test_oversized_file_gets_its_own_batch(self, tmp_path: Path) -> None:
        batches = OutputMerger(8).plan(self._files(tmp_path, [3, 20, 2]), tmp_path)
        assert [b.size_bytes for b in batches] == [3, 20, 2]

    def test_oversized_first_file(self, tmp_path: Path) -> None:
        batches = OutputMerger(8).plan(self._files(tmp_path, [20, 2]), tmp_path)
        assert [b.size_bytes for b in batches] == [20, 2]

    def test_empty_files_never_open_a_batch(self, tmp_path: Path) -> None:
        batches = OutputMerger(8).plan(self._files(tmp_path, [0, 0, 8, 0]), tmp_path)
        assert [b.size_bytes for b in batches] == [8]
        assert len(batches[0].sources) == 4

    def test_indices_are_contiguous(self, tmp_path: Path) -> None:
        batches = OutputMerger(5).plan(self._files(tmp_path, [4, 4, 4, 4, 9, 1]), tmp_path)
        assert [b.index for b in batches] == list(range(1, len(batches) + 1))
        assert [b.path.name for b in batches] == [f"merged_{i}.txt" for i in range(1, len(batches) + 1)]

    def test_rejects_non_positive_ceiling(self) -> None:
        with pytest.raises(ConfigurationError):
            OutputMerger(0)


@pytest.mark.unit
class TestMerge:
    """Tests for the full merge."""

    def test_spec_example_sizes(self, output_root: Path) -> None:
        write(output_root / "repo" / "260101_a.txt", 5 * MB, b"a")
        write(output_root / "repo" / "260102_b.txt", 4 * MB, b"b")
        write(output_root / "repo" / "260103_c.txt", 2 * MB, b"c")
        merge_dir = output_root / "merged"

        result = OutputMerger(8 * MB).merge(output_root, merge_dir)

        assert merged_files(merge_dir) == ["merged_1.txt", "merged_2.txt"]
        assert (merge_dir / "merged_1.txt").read_bytes() == b"a" * 5 * MB
        assert (merge_dir / "merged_2.txt").read_bytes() == b"b" * 4 * MB + b"c" * 2 * MB
        assert result.input_count == 3
        assert result.total_bytes == 11 * MB

    def test_single_oversized_file(self, output_root: Path) -> None:
        write(output_root / "repo" / "260101_big.txt", 20 * MB)
        merge_dir = output_root / "merged"

        result = OutputMerger(8 * MB).merge(output_root, merge_dir)

        assert merged_files(merge_dir) == ["merged_1.txt"]
        assert (merge_dir / "merged_1.txt").stat().st_size == 20 * MB
        assert len(result.batches) == 1

    def test_no_inputs_is_not_an_error(self, output_root: Path) -> None:
        write(output_root / "repo" / "README.txt", 10)
        merge_dir = output_root / "merged"

        result = OutputMerger().merge(output_root, merge_dir)

        assert result.batches == []
        assert merge_dir.is_dir()
        assert merged_files(merge_dir) == []

    def test_concatenation_is_lossless(self, output_root: Path) -> None:
        contents = {}
        for repo in ("alpha", "beta"):
            for day in range(1, 8):
                path = output_root / repo / f"2601{day:02d}_{repo}.txt"
                data = f"{repo}-{day}\n".encode() * (day * 3)
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(data)
                contents[path] = data
        merge_dir = output_root / "merged"

        result = OutputMerger(64).merge(output_root, merge_dir)

        ordered = [contents[p] for p in sorted(contents, key=lambda p: str(p).encode())]
        joined = b"".join((merge_dir / f"merged_{b.index}.txt").read_bytes() for b in result.batches)
        assert joined == b"".join(ordered)
        for batch in result.batches:
            expected = b"".join(src.path.read_bytes() for src in batch.sources)
            assert batch.path.read_bytes() == expected
            assert len(batch.sources) == 1 or batch.size_bytes <= 64

    def test_inputs_are_untouched(self, output_root: Path) -> None:
        source = write(output_root / "repo" / "260101_a.txt", 7, b"z")
        OutputMerger(4).merge(output_root, output_root / "merged")
        assert source.read_bytes() == b"z" * 7

    def test_purges_previous_run(self, output_root: Path) -> None:
        merge_dir = output_root / "merged"
        for i in range(1, 5):
            write(merge_dir / f"merged_{i}.txt", 3)
        write(merge_dir / "keep.log", 3)
        write(output_root / "repo" / "260101_a.txt", 2)

        OutputMerger().merge(output_root, merge_dir)

        assert merged_files(merge_dir) == ["merged_1.txt"]
        assert (merge_dir / "keep.log").exists()

    def test_rerun_does_not_merge_its_own_output(self, output_root: Path) -> None:
        write(output_root / "repo" / "260101_a.txt", 5, b"a")
        merge_dir = output_root / "merged"
        merger = OutputMerger()

        merger.merge(output_root, merge_dir)
        merger.merge(output_root, merge_dir)

        assert (merge_dir / "merged_1.txt").read_bytes() == b"aaaaa"

    def test_merge_dir_must_be_inside_root(self, output_root: Path, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            OutputMerger().merge(output_root, tmp_path / "merged")
        with pytest.raises(ConfigurationError):
            OutputMerger().merge(output_root, output_root)
