from fu_server.names import ALPHABET, NAME_LENGTH, NameGenerator


def test_alphabet_has_no_ambiguous_characters():
    assert len(ALPHABET) == 57
    assert len(set(ALPHABET)) == 57
    for ch in "0O1lI":
        assert ch not in ALPHABET


def test_generate_appends_extension():
    name = NameGenerator().generate(".txt")
    assert len(name) == NAME_LENGTH + 4
    assert name.endswith(".txt")
    assert all(ch in ALPHABET for ch in name[:NAME_LENGTH])


def test_generate_without_extension():
    name = NameGenerator().generate("")
    assert len(name) == NAME_LENGTH
    assert all(ch in ALPHABET for ch in name)


def test_same_seed_same_sequence():
    a = NameGenerator(seed=42)
    b = NameGenerator(seed=42)
    assert [a.generate() for _ in range(10)] == [b.generate() for _ in range(10)]


def test_unseeded_generators_differ():
    a = NameGenerator()
    b = NameGenerator()
    assert [a.generate() for _ in range(20)] != [b.generate() for _ in range(20)]


def test_generators_do_not_share_state():
    a = NameGenerator(seed=7)
    expected = NameGenerator(seed=7).generate()
    NameGenerator(seed=99).generate()
    assert a.generate() == expected
