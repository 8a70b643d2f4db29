"""
Tests of covid_analysis.inspect_dataset
"""

from __future__ import annotations

import pandas as pd

from covid_analysis.inspect_dataset import main, perfilar_dataset


def test_perfilar_dataset_cases(cases):
    res = perfilar_dataset(cases).set_index("metrica")["valor"]

    assert res["total_registros"] == 7
    assert res["total_locations"] == 4
    assert res["fecha_minima"] == pd.Timestamp("2021-01-01")
    assert res["filas_agregadas"] == 2
    assert res["new_cases_nulos"] == 0


def test_perfilar_dataset_vaccinations(vaccinations):
    res = perfilar_dataset(vaccinations).set_index("metrica")["valor"]

    assert "filas_agregadas" not in res.index
    assert res["new_vaccinations_nulos"] == 1


def test_main_saves_profile(vaccinations_csv, tmp_path, capsys):
    salida = tmp_path / "perfil.csv"

    main([str(vaccinations_csv), "--vacunaciones", "--salida", str(salida)])

    assert "PERFILADO" in capsys.readouterr().out
    perfil = pd.read_csv(salida)
    assert perfil.columns.tolist() == ["metrica", "valor", "descripcion"]
