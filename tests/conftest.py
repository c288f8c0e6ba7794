"""
Shared pytest fixtures for scoring, analysis and report tests.
All in-memory dictionaries; nothing is read from disk.
"""

import pytest


def factor(fid, **extra):
    return {"id": fid, "kode": fid, "nama": f"Factor {fid}", **extra}


@pytest.fixture
def single_chain():
    """One KKA -> one aspect -> one parameter -> two factors, all weight 1."""
    return [
        {
            "id": "K1",
            "kode": "I",
            "nama": "Komitmen",
            "weight": 1,
            "aspects": [
                {
                    "id": "A1",
                    "kode": "1.1",
                    "nama": "Pedoman",
                    "weight": 1,
                    "parameters": [
                        {
                            "id": "P1",
                            "kode": "1.1.1",
                            "nama": "Pedoman GCG",
                            "weight": 1,
                            "factors": [
                                factor("f1", max_score=1),
                                factor("f2", max_score=1),
                            ],
                        }
                    ],
                }
            ],
        }
    ]


@pytest.fixture
def two_parameter_aspect():
    """One aspect holding a weight-2 and a weight-1 parameter."""
    return [
        {
            "id": "K1",
            "kode": "I",
            "aspects": [
                {
                    "id": "A1",
                    "parameters": [
                        {"id": "P1", "weight": 2, "factors": [factor("f1")]},
                        {"id": "P2", "weight": 1, "factors": [factor("f2")]},
                    ],
                }
            ],
        }
    ]


@pytest.fixture
def three_kkas():
    """Three single-factor KKAs, handy for AOI and summary checks."""
    return [
        {
            "id": f"K{i}",
            "kode": kode,
            "nama": nama,
            "aspects": [
                {
                    "id": f"A{i}",
                    "parameters": [{"id": f"P{i}", "factors": [factor(f"f{i}")]}],
                }
            ],
        }
        for i, (kode, nama) in enumerate(
            [("I", "Komitmen"), ("II", "RUPS"), ("III", "Dewan Komisaris")], start=1
        )
    ]
