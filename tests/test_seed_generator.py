import pytest

from src.json_store import write_editions
from src.models import Article, Edition
from src.seed_generator import SeedGenerator, escape, ruby_identifier, to_ruby_hash

JOURNALS_CSV = (
    "slug,name,institutional_affiliation,issn,thematic_scope,website_url,periodicity,"
    "current_status,foundation_year,closure_year,qualis\n"
    "cadernos_lepaarq,Laboratório de Ensino e Pesquisa em Antropologia e Arqueologia,"
    "Universidade Federal de Pelotas - UFPEL,1806-9118,Arqueologia e Antropologia,"
    "https://periodicos.ufpel.edu.br/index.php/lepaarq,Semestral,Ativa,2004,,A2\n"
)


@pytest.fixture
def generator(tmp_path) -> SeedGenerator:
    journals_file = tmp_path / 'journals.csv'
    journals_file.write_text(JOURNALS_CSV, encoding='utf-8')
    return SeedGenerator(
        journals_file=str(journals_file),
        input_dir=str(tmp_path / 'raw'),
        output_dir=str(tmp_path / 'seeds'),
    )


def _editions() -> list:
    return [
        Edition(
            title="v. 1 n. 1 (2004)",
            url="https://periodicos.ufpel.edu.br/issue/view/1",
            date="2004-06-01",
            articles=[
                Article(title="Cerâmica", url="https://a/1", authors=["Ana Lima"], keywords=["cerâmica"],
                        doi="https://doi.org/10.1/c", abstract="Resumo da cerâmica."),
                Article(title="Editorial", url="https://a/2", authors=[]),
                Article(title="Cerâmica", url="https://a/1-dup", authors=["Ana Lima"]),
            ],
        ),
        Edition(
            title="v. 1 n. 1 (2004)",
            url="https://periodicos.ufpel.edu.br/issue/view/1",
            articles=[
                Article(title="Líticos", url="https://a/3", authors=["Bruno Costa", "Carla Dias"]),
                Article(title="Cerâmica", url="https://a/1", authors=["Ana Lima"]),
            ],
        ),
        Edition(
            title="v. 2 n. 1 (2005)",
            url="https://periodicos.ufpel.edu.br/issue/view/2",
            articles=[Article(title='O "sítio" \\ norte', url="https://a/4", authors=["Dora Melo"])],
        ),
    ]


def test_escape_backslash_then_quote() -> None:
    assert escape('a\\b"c') == 'a\\\\b\\"c'
    assert escape(None) == ''


def test_to_ruby_hash() -> None:
    rendered = to_ruby_hash({'title': 'T', 'authors': ['A', 'B'], 'doi': None, 'year': 2004})
    assert rendered == '{ title: "T", authors: ["A", "B"], doi: nil, year: 2004 }'


def test_ruby_identifier() -> None:
    assert ruby_identifier("v. 1 n. 1 (2004)") == "v_1_n_1_2004"
    assert ruby_identifier("2024 Especial") == "j_2024_especial"
    assert ruby_identifier("") == ""


def test_group_editions_skips_authorless_and_duplicate_articles(generator) -> None:
    grouped = generator.group_editions(_editions())

    assert [edition.title for edition, _ in grouped] == ["v. 1 n. 1 (2004)", "v. 2 n. 1 (2005)"]
    assert [a.title for a in grouped[0][1]] == ["Cerâmica", "Líticos"]
    assert grouped[0][1][0].url == "https://a/1"


def test_build_seed(generator) -> None:
    seed = generator.build_seed('cadernos_lepaarq', _editions())

    assert 'ScientificJournal.find_or_create_by!(issn: attrs[:issn])' in seed
    assert 'cadernos_lepaarq = ScientificJournal.find_by!(issn: "1806-9118")' in seed
    assert 'foundation_year: 2004' in seed
    assert 'closure_year: nil' in seed
    assert seed.count('volume: "v. 1 n. 1 (2004)" }') == 1
    assert seed.count('{ title: "Cerâmica"') == 1
    assert 'Editorial' not in seed
    assert 'title: "O \\"sítio\\" \\\\ norte"' in seed
    assert 'Article.find_or_create_by!(title: attrs[:title], edition: cadernos_lepaarq_v_1_n_1_2004_edition)' in seed
    assert 'Author.find_or_create_by!(name: author_name)' in seed
    assert 'Keyword.find_or_create_by!(name: kw)' in seed


def test_unknown_journal_is_seeded_by_name(generator) -> None:
    seed = generator.build_seed('revista_nova', _editions()[2:])

    assert 'ScientificJournal.find_or_create_by!(name: attrs[:name])' in seed
    assert 'revista_nova = ScientificJournal.find_by!(name: "revista_nova")' in seed


def test_generate_all_writes_one_script_per_file(generator, tmp_path) -> None:
    write_editions(_editions(), str(tmp_path / 'raw' / 'cadernos_lepaarq.json'))
    (tmp_path / 'raw' / 'broken.json').write_text('not json', encoding='utf-8')

    generated = generator.generate_all()

    assert generated == [str(tmp_path / 'seeds' / 'cadernos_lepaarq_seeds.rb')]
    content = (tmp_path / 'seeds' / 'cadernos_lepaarq_seeds.rb').read_text(encoding='utf-8')
    assert content.startswith('scientific_journals = [')


def test_missing_metadata_file(tmp_path) -> None:
    generator = SeedGenerator(
        journals_file=str(tmp_path / 'missing.csv'),
        input_dir=str(tmp_path),
        output_dir=str(tmp_path),
    )

    assert generator.journal_metadata('cadernos_lepaarq') == {'name': 'cadernos_lepaarq'}


def test_escape_blocks_ruby_interpolation() -> None:
    assert escape('Custo #{system("ls")}') == 'Custo \\#{system(\\"ls\\")}'
    assert escape('#@var e #$global') == '\\#@var e \\#$global'


def test_build_seed_renders_hash_signs_literally(generator) -> None:
    editions = [Edition(title="v. 3", url="https://a/e/3",
                        articles=[Article(title="Custo #{x}", url="https://a/5", authors=["Ana Lima"])])]

    seed = generator.build_seed('cadernos_lepaarq', editions)

    assert 'title: "Custo \\#{x}"' in seed
    assert '"Custo #{x}"' not in seed
