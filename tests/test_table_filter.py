from statement_desk.table import filter_records

from tests.helpers.records import ids, make_statement, make_table


def _people():
    return [
        make_statement(1, customer_name="Ana Torres"),
        make_statement(2, customer_name="BRIAN O'NEILL"),
        make_statement(3, customer_name="Dana Whitfield"),
        make_statement(4, customer_name=None),
        make_statement(5, customer_name="Brianna Stone"),
    ]


def test_search_is_case_insensitive_substring():
    table = make_table(_people())
    table.set_search_term("bRiAn")
    assert ids(table.visible_records) == [2, 5]
    assert table.filtered_count == 2


def test_search_matches_inside_words():
    table = make_table(_people())
    table.set_search_term("tfi")
    assert ids(table.visible_records) == [3]


def test_absent_values_never_match_a_non_empty_term():
    table = make_table(_people())
    table.set_search_term("none")
    assert table.filtered_count == 0
    assert table.visible_records == []


def test_empty_term_keeps_everything_in_source_order():
    table = make_table(_people())
    table.set_search_term("")
    assert ids(table.visible_records) == [1, 2, 3, 4, 5]


def test_without_filter_field_search_term_is_ignored():
    table = make_table(_people(), filter_field=None)
    table.set_search_term("ana")
    assert table.filtered_count == 5


def test_filter_is_idempotent():
    people = _people()
    once = filter_records(people, "customer_name", "an")
    twice = filter_records(once, "customer_name", "an")
    assert once == twice
    assert ids(once) == [1, 2, 3, 5]


def test_filter_on_numeric_field_uses_text_form():
    records = [make_statement(10), make_statement(21), make_statement(102)]
    table = make_table(records, filter_field="statement_id")
    table.set_search_term("10")
    assert ids(table.visible_records) == [10, 102]


def test_setting_a_term_returns_to_page_one():
    records = [make_statement(i, customer_name="x") for i in range(12)]
    table = make_table(records, page_size=5)
    assert table.change_page(3)
    table.set_search_term("x")
    assert table.current_page == 1


def test_search_round_trip_restores_source_order():
    people = _people()
    table = make_table(people, page_size=2)
    table.change_page(2)
    table.set_search_term("brian")
    table.set_search_term("")
    assert table.current_page == 1
    assert ids(table.visible_records) == [1, 2]
    assert table.filtered_count == len(people)
