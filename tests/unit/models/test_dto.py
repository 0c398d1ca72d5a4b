from datetime import date

import pytest
from pydantic import ValidationError

from songlib.models.dto import (
    LyricsPageParams,
    SongCreate,
    SongDTO,
    SongDetail,
    SongQueryParams,
    SongUpdate,
)


@pytest.mark.unit
def test_song_dto_serializes_with_camel_case_and_iso_date():
    dto = SongDTO(id="1", title="T", group_name="G", release_date=date(2006, 7, 16))

    assert dto.to_dict() == {
        "id": "1",
        "title": "T",
        "groupName": "G",
        "releaseDate": "2006-07-16",
        "link": "",
        "lyrics": "",
    }


@pytest.mark.unit
def test_song_detail_parses_day_month_year():
    detail = SongDetail.model_validate({"releaseDate": "05.11.1999", "text": "t", "link": "l"})
    assert detail.release_date == date(1999, 11, 5)


@pytest.mark.unit
def test_song_detail_rejects_iso_date_string():
    with pytest.raises(ValidationError):
        SongDetail.model_validate({"releaseDate": "1999-11-05"})


@pytest.mark.unit
def test_song_create_strips_and_requires_both_fields():
    data = SongCreate.model_validate({"group": " Muse ", "title": " Starlight "})
    assert (data.group, data.title) == ("Muse", "Starlight")

    with pytest.raises(ValidationError):
        SongCreate.model_validate({"group": "Muse", "title": ""})


@pytest.mark.unit
def test_song_update_supplied_skips_missing_and_null_fields():
    update = SongUpdate.model_validate({"id": "abc", "title": "New", "link": None, "lyrics": "a\n\nb"})

    assert update.supplied() == {"title": "New", "lyrics": "a\n\nb"}
    assert update.row_values() == {"title": "New"}


@pytest.mark.unit
def test_song_update_accepts_camel_case_fields():
    update = SongUpdate.model_validate({"id": "abc", "groupName": "Muse", "releaseDate": "2001-02-03"})

    assert update.supplied() == {"group_name": "Muse", "release_date": date(2001, 2, 3)}
    assert update.row_values() == {"release_date": date(2001, 2, 3)}


@pytest.mark.unit
def test_song_update_keeps_lyrics_whitespace_and_allows_empty_link():
    update = SongUpdate.model_validate({"id": " abc ", "link": "", "lyrics": "  indented\n"})

    assert update.id == "abc"
    assert update.supplied() == {"link": "", "lyrics": "  indented\n"}


@pytest.mark.unit
@pytest.mark.parametrize("field", ["title", "groupName"])
def test_song_update_rejects_blank_names(field):
    with pytest.raises(ValidationError):
        SongUpdate.model_validate({"id": "abc", field: "   "})


@pytest.mark.unit
def test_query_params_to_filter_computes_offset():
    params = SongQueryParams.model_validate({"group": "beat", "page": "3", "limit": "10"})

    song_filter = params.to_filter()

    assert song_filter.group == "beat"
    assert (song_filter.limit, song_filter.offset) == (10, 20)


@pytest.mark.unit
def test_query_params_blank_values_mean_absent():
    song_filter = SongQueryParams.model_validate({"startDate": "", "endDate": " ", "page": "", "limit": ""}).to_filter()

    assert song_filter.start_date is None and song_filter.end_date is None
    assert (song_filter.limit, song_filter.offset) == (0, 0)


@pytest.mark.unit
@pytest.mark.parametrize("query,message", [
    ({"startDate": "2020-01-01"}, "either both startDate and endDate should be provided, or neither of them"),
    ({"page": "1"}, "either both page and limit should be provided, or neither of them"),
    ({"startDate": "2020-02-01", "endDate": "2020-01-01"}, "startDate cannot be after endDate"),
])
def test_query_params_reject_unpaired_or_inverted_values(query, message):
    with pytest.raises(ValidationError) as excinfo:
        SongQueryParams.model_validate(query)
    assert message in str(excinfo.value)


@pytest.mark.unit
def test_lyrics_page_params_require_positive_values():
    assert LyricsPageParams.model_validate({"page": "2", "limit": "5"}).page == 2
    with pytest.raises(ValidationError):
        LyricsPageParams.model_validate({"page": "0", "limit": "5"})
