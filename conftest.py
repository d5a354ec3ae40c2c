import pytest

from npcbrain_storage import close_brain, connect


class FixedRandom:
    """Stand-in for random.Random whose rolls always return one value."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value

    def sample(self, population, k):
        return list(population)[:k]


@pytest.fixture
def conn():
    connection = connect(":memory:")
    yield connection
    close_brain(connection)


@pytest.fixture
def fixed_rng():
    return FixedRandom


@pytest.fixture
def single_fragments(conn):
    """Fragment tables holding one prefix, root and suffix: only 'kalomi' can be formed."""
    conn.execute("INSERT INTO prefixes (prefix, functional_tag) VALUES ('ka', 'test')")
    conn.execute("INSERT INTO root_words (phonetic_seed, semantic_vector_tag) VALUES ('lo', 'test')")
    conn.execute("INSERT INTO suffixes (suffix, functional_tag) VALUES ('mi', 'test')")
    conn.commit()
    return conn
