"""Tests for view state transitions."""

from imobi.models.enums import ALL, SortDirection, SortField, ViewMode
from imobi.schemas.dashboard import ViewState


def test_defaults() -> None:
    view = ViewState()
    assert view.status_filter == ALL
    assert view.sort_field == SortField.DATA_ATUALIZACAO
    assert view.sort_direction == SortDirection.DESC
    assert view.view_mode == ViewMode.LIST


def test_transitions_do_not_mutate() -> None:
    view = ViewState()
    view.with_search("centro")
    assert view.search == ""


def test_sort_toggles_same_field() -> None:
    view = ViewState().sort_by(SortField.VALOR)
    assert (view.sort_field, view.sort_direction) == (SortField.VALOR, SortDirection.DESC)

    view = view.sort_by(SortField.VALOR)
    assert view.sort_direction == SortDirection.ASC

    view = view.sort_by(SortField.BAIRRO)
    assert (view.sort_field, view.sort_direction) == (SortField.BAIRRO, SortDirection.DESC)


def test_status_card_toggles_filter() -> None:
    view = ViewState().toggle_status("Locado")
    assert view.status_filter == "Locado"
    assert view.toggle_status("Locado").status_filter == ALL


def test_one_row_menu_at_a_time() -> None:
    view = ViewState().open_menu("a").open_menu("b")
    assert view.active_menu == "b"
    assert view.open_menu("b").active_menu is None


def test_close_menus() -> None:
    view = ViewState().open_menu("a").toggle_status_menu().close_menus()
    assert view.active_menu is None
    assert view.status_menu_open is False


def test_reset_keeps_sort_and_mode() -> None:
    view = (
        ViewState()
        .with_search("x")
        .with_filters(status_filter="Locado", category_filter="Comercial", bairro_filter="Centro")
        .sort_by(SortField.CODIGO)
        .with_view_mode(ViewMode.FINANCIAL)
        .reset()
    )
    assert view.search == ""
    assert view.status_filter == ALL
    assert view.category_filter == ALL
    assert view.bairro_filter == ""
    assert view.sort_field == SortField.CODIGO
    assert view.view_mode == ViewMode.FINANCIAL


def test_session_round_trip_and_fallback() -> None:
    view = ViewState().sort_by(SortField.VALOR).with_search("rua")
    assert ViewState.from_session(view.to_session()) == view
    assert ViewState.from_session({"sort_field": "bogus"}) == ViewState()
    assert ViewState.from_session(None) == ViewState()
