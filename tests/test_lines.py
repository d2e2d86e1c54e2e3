from ocr.lines import clean_words, reconstruct_lines
from ocr.tuning import LINE_Y_THRESHOLD_PX
from fakes import word


def test_empty_input_gives_no_lines():
    assert reconstruct_lines([]) == []


def test_words_on_similar_rows_join_into_one_line():
    lines = reconstruct_lines([word("Lee", 90, 200, 302), word("Anna", 92, 100, 300)])
    assert len(lines) == 1
    ln = lines[0]
    assert ln.text == "Anna Lee"
    assert ln.conf == 91.0
    assert (ln.bbox.x0, ln.bbox.y0, ln.bbox.x1, ln.bbox.y1) == (100, 300, 280, 332)


def test_line_bbox_is_union_of_word_boxes():
    a = word("Anna", 90, 10, 100, w=50, h=20)
    b = word("Maria", 90, 80, 110, w=70, h=40)
    (ln,) = reconstruct_lines([a, b])
    assert (ln.bbox.x0, ln.bbox.y0, ln.bbox.x1, ln.bbox.y1) == (10, 100, 150, 150)


def test_threshold_is_measured_from_the_line_opener():
    # 0 -> 18 joins, 0 -> 30 does not, even though 18 -> 30 is within reach
    words = [word("Aa", 90, 0, 0), word("Bb", 90, 0, LINE_Y_THRESHOLD_PX), word("Cc", 90, 0, 30)]
    lines = reconstruct_lines(words)
    assert [ln.text for ln in lines] == ["Aa Bb", "Cc"]


def test_custom_threshold_is_honoured():
    words = [word("Aa", 90, 0, 0), word("Bb", 90, 0, 25)]
    assert len(reconstruct_lines(words)) == 2
    assert len(reconstruct_lines(words, y_threshold=30)) == 1


def test_lines_come_out_top_to_bottom():
    words = [word("Cara", 90, 0, 900), word("Anna", 90, 0, 100), word("Bob", 90, 0, 500)]
    assert [ln.text for ln in reconstruct_lines(words)] == ["Anna", "Bob", "Cara"]


def test_jersey_numbers_and_noise_tokens_are_dropped():
    words = [
        word("12", 95, 0, 100),   # jersey number
        word("7", 99, 50, 100),   # single char + numeric
        word("A", 99, 90, 100),   # too short
        word("Bob", 20, 130, 100),  # low confidence
        word("  ", 90, 160, 100),  # empty after normalize
        word("Anna", 90, 200, 100),
    ]
    lines = reconstruct_lines(words)
    assert [ln.text for ln in lines] == ["Anna"]


def test_only_numeric_words_give_no_lines():
    assert reconstruct_lines([word("12", 95, 0, 100), word("23", 95, 0, 200)]) == []


def test_clean_words_normalizes_text():
    (w,) = clean_words([word(" O’Neil\n", 90, 0, 0)])
    assert w.text == "O'Neil"


def test_input_words_are_not_mutated():
    src = [word(" Anna ", 90, 0, 0)]
    reconstruct_lines(src)
    assert src[0].text == " Anna "
