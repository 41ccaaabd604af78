import json

from embed_builder import DESCRIPTION_LIMIT, FIELD_VALUE_LIMIT, TITLE_LIMIT, EmbedBuilder, build_embed
from models import AnnouncementRecord
from subdocuments import PLACEHOLDER, parse_json_maybe

NOW = "2024-06-01T12:00:00+00:00"


def builder():
    return EmbedBuilder(clock=lambda: NOW)


def field_values(embed):
    return {f["name"]: f["value"] for f in embed["fields"]}


def test_full_record():
    record = AnnouncementRecord.from_api({
        "recordid": "abc",
        "datasetid": "annonces-commerciales",
        "fields": {
            "commercant": "ACME SAS",
            "familleavis_lib": "Dépôts des comptes",
            "url_complete": "https://www.bodacc.fr/annonce/detail/abc",
            "ville": "Paris",
            "cp": "75001",
            "tribunal": "GREFFE DU TRIBUNAL DE COMMERCE DE PARIS",
            "dateparution": "2024-05-30",
            "registre": "123 456 789",
            "publicationavis_facette": "Bodacc C",
            "departement_nom_officiel": "Paris",
            "numerodepartement": "75",
            "depot": json.dumps({"typeDepot": "Comptes annuels", "dateCloture": "2023-12-31",
                                 "descriptif": "Comptes sociaux"}),
            "modificationsgenerales": json.dumps({"descriptif": "Changement de dirigeant"}),
        },
    })

    embed = builder().build_embed(record)

    assert embed["title"] == "ACME SAS — Dépôts des comptes"
    assert embed["url"] == "https://www.bodacc.fr/annonce/detail/abc"
    assert embed["timestamp"] == NOW
    assert embed["footer"] == {"text": "BODACC • dataset: annonces-commerciales"}
    assert embed["description"] == (
        "**Modif. :** Changement de dirigeant\n"
        "**Dépôt :** Comptes annuels (2023-12-31)\n"
        "Comptes sociaux"
    )
    assert [f["name"] for f in embed["fields"]] == [
        "Type / Publication", "Date parution", "Ville / CP", "Tribunal", "Registre / RCS", "Département",
    ]
    assert all(f["inline"] is True for f in embed["fields"])
    values = field_values(embed)
    assert values["Type / Publication"] == "Bodacc C"
    assert values["Ville / CP"] == "Paris 75001"
    assert values["Registre / RCS"] == "123 456 789"
    assert values["Département"] == "Paris (75)"


def test_falls_back_to_person_subdocument():
    personne = {
        "personne": {
            "denomination": "GLOBEX",
            "adresseSiegeSocial": {"ville": "Lyon", "codePostal": "69002"},
            "numeroImmatriculation": {"numeroIdentification": "987 654 321"},
        }
    }
    record = AnnouncementRecord.from_api({
        "recordid": "x",
        "fields": {"listepersonnes": json.dumps(personne), "typeavis_lib": "Avis initial"},
    })

    embed = builder().build_embed(record)
    values = field_values(embed)

    assert embed["title"] == "GLOBEX — Annonce"
    assert embed["url"] == "https://www.bodacc.fr/"
    assert values["Ville / CP"] == "Lyon 69002"
    assert values["Registre / RCS"] == "987 654 321"
    assert values["Type / Publication"] == "Avis initial"
    assert "description" not in embed


def test_person_list_uses_first_person_and_nom():
    record = AnnouncementRecord.from_api({
        "recordid": "x",
        "fields": {"listepersonnes": json.dumps({"personne": [{"nom": "DUPONT"}, {"nom": "MARTIN"}]})},
    })

    assert builder().build_embed(record)["title"].startswith("DUPONT — ")


def test_malformed_subdocuments_degrade_to_placeholders():
    record = AnnouncementRecord.from_api({
        "recordid": "x",
        "fields": {
            "listepersonnes": "{not json",
            "depot": "[1, 2",
            "modificationsgenerales": "\"just a string\"",
        },
    })
    b = builder()

    embeds = b.build_embeds([record])

    embed = embeds[0]
    assert embed["title"] == f"{PLACEHOLDER} — Annonce"
    assert "description" not in embed
    assert set(field_values(embed).values()) == {
        PLACEHOLDER, f"{PLACEHOLDER} {PLACEHOLDER}", f"{PLACEHOLDER} ({PLACEHOLDER})",
    }
    assert b.get_stats()["failures"] == 3


def test_garbage_record_never_raises():
    for raw in (None, [], {"fields": "oops"}, {"fields": {"commercant": {"nested": True}, "cp": ["75"]}}):
        embed = builder().build_embed(AnnouncementRecord.from_api(raw))
        assert embed["title"] == f"{PLACEHOLDER} — Annonce"
        assert embed["footer"]["text"] == f"BODACC • dataset: {PLACEHOLDER}"


def test_deposit_without_type_is_ignored():
    record = AnnouncementRecord.from_api({
        "recordid": "x",
        "fields": {"depot": json.dumps({"descriptif": "orphan"})},
    })
    assert "description" not in builder().build_embed(record)


def test_long_values_truncated_to_discord_limits():
    record = AnnouncementRecord.from_api({
        "recordid": "x",
        "fields": {
            "commercant": "A" * 400,
            "tribunal": "T" * 2000,
            "modificationsgenerales": json.dumps({"descriptif": "M" * 5000}),
        },
    })

    embed = builder().build_embed(record)

    assert len(embed["title"]) == TITLE_LIMIT
    assert embed["title"].endswith("…")
    assert len(field_values(embed)["Tribunal"]) == FIELD_VALUE_LIMIT
    assert len(embed["description"]) == DESCRIPTION_LIMIT


def test_parse_json_maybe():
    assert parse_json_maybe('{"a": 1}') == {"a": 1}
    assert parse_json_maybe({"a": 1}) == {"a": 1}
    assert parse_json_maybe("") is None
    assert parse_json_maybe("[1]") is None
    assert parse_json_maybe("nope") is None
    assert parse_json_maybe(42) is None


def test_build_embeds_keeps_order():
    records = [AnnouncementRecord.from_api({"recordid": str(i), "fields": {"commercant": f"C{i}"}}) for i in range(3)]
    titles = [e["title"] for e in builder().build_embeds(records)]
    assert titles == ["C0 — Annonce", "C1 — Annonce", "C2 — Annonce"]


def test_module_level_build_embed():
    record = AnnouncementRecord.from_api({"recordid": "x", "datasetid": "annonces-commerciales",
                                          "fields": {"commercant": "INITECH", "familleavis_lib": "Ventes et cessions"}})

    embed = build_embed(record)

    assert embed["title"] == "INITECH — Ventes et cessions"
    assert embed["footer"]["text"] == "BODACC • dataset: annonces-commerciales"
    assert embed["timestamp"]
