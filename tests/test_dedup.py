from linededup.dedup import dedup_bytes, dedup_lines, dedup_text, render_lines, split_lines


def test_example_from_mixed_input():
    kept, stats = dedup_lines(["a", "b", "a", "c", "b"])
    assert kept == ["a", "b", "c"]
    assert stats.lines_read == 5
    assert stats.duplicates_removed == 2
    assert stats.lines_written == 3

def test_empty_input():
    kept, stats = dedup_text("")
    assert kept == []
    assert (stats.lines_read, stats.duplicates_removed, stats.lines_written) == (0, 0, 0)
    assert render_lines(kept) == ""

def test_all_unique_lines_pass_through():
    lines = [f"line{i}" for i in range(50)]
    kept, stats = dedup_lines(lines)
    assert kept == lines
    assert stats.duplicates_removed == 0

def test_blank_lines_are_deduplicated_too():
    kept, stats = dedup_text("a\n\nb\n\na")
    assert kept == ["a", "", "b"]
    assert stats.lines_read == 5
    assert stats.duplicates_removed == 2
    assert render_lines(kept) == "a\n\nb\n"

def test_split_lines_terminators():
    assert split_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]
    assert split_lines("a\n") == ["a"]
    assert split_lines("\n") == [""]
    assert split_lines("a\n\n") == ["a", ""]
    assert split_lines("a\r\n\r\nb") == ["a", "", "b"]
    # only CR and LF break lines
    assert split_lines("a\x0cb c") == ["a\x0cb c"]

def test_mixed_terminators_compare_equal_and_render_canonical():
    kept, stats = dedup_text("x\r\ny\rx\ny\n")
    assert kept == ["x", "y"]
    assert stats.duplicates_removed == 2
    assert render_lines(kept) == "x\ny\n"

def test_comparison_is_exact():
    kept, stats = dedup_lines(["a", "a ", " a", "A", "a"])
    assert kept == ["a", "a ", " a", "A"]
    assert stats.duplicates_removed == 1

def test_trim_trailing_whitespace_option():
    kept, stats = dedup_lines(["a", "a  ", "a\t", " a"], trim_trailing_whitespace=True)
    assert kept == ["a", " a"]
    assert stats.duplicates_removed == 2

def test_idempotence():
    once, _ = dedup_text("q\nw\nq\ne\nw\nr\n")
    twice, stats = dedup_lines(once)
    assert twice == once
    assert stats.duplicates_removed == 0

def test_order_and_count_invariants():
    lines = ["c", "a", "c", "b", "a", "d", "c", "b"]
    kept, stats = dedup_lines(lines)

    first_seen = []
    for line in lines:
        if line not in first_seen:
            first_seen.append(line)
    assert kept == first_seen
    assert stats.lines_read == stats.duplicates_removed + len(kept)

def test_seen_set_not_shared_between_calls():
    dedup_lines(["a", "b"])
    kept, stats = dedup_lines(["a", "b"])
    assert kept == ["a", "b"]
    assert stats.duplicates_removed == 0

def test_dedup_bytes_utf16():
    result = dedup_bytes("apple\r\nbanana\r\napple\r\n".encode("utf-16"))
    assert result.lines == ["apple", "banana"]
    assert result.stats.lines_read == 3
    assert result.encoding.bom is True

def test_dedup_bytes_invalid_utf8_never_fails():
    result = dedup_bytes(b"\xc3\x28\n\x80\x81\n\xc3\x28\n")
    assert result.stats.lines_read == result.stats.duplicates_removed + result.stats.lines_written
    assert result.stats.elapsed_seconds >= 0

def test_dedup_bytes_windows1252():
    result = dedup_bytes(b"h\xe9llo\nworld\nh\xe9llo")
    assert result.lines == ["héllo", "world"]
    assert render_lines(result.lines) == "héllo\nworld\n"
    assert result.stats.lines_read == 3
    assert result.stats.duplicates_removed == 1
    assert result.stats.lines_written == 2
    assert result.encoding.replacements == 0
