# script para visualizar la estructura de los datos a usar

import argparse

import pandas as pd

from covid_analysis import config
from covid_analysis.aggregator import filter_real_locations
from covid_analysis.io import read_cases, read_vaccinations


def perfilar_dataset(df: pd.DataFrame) -> pd.DataFrame:
    """Tabla de perfilado de un dataset cargado (casos/muertes o vacunaciones)"""
    filas = [
        ("total_registros", len(df), "Total de registros en el dataset"),
        ("total_locations", df["location"].nunique(), "Número de locations únicas"),
        ("fecha_minima", df["date"].min(), "Fecha más antigua en los datos"),
        ("fecha_maxima", df["date"].max(), "Fecha más reciente en los datos"),
        ("columnas_totales", len(df.columns), "Número total de columnas"),
    ]
    if "continent" in df.columns:
        agregados = len(df) - len(filter_real_locations(df))
        filas.append(("filas_agregadas", agregados, "Filas de continente/mundo (continent vacío)"))
    for col in ("new_cases", "new_deaths", "new_vaccinations"):
        if col in df.columns:
            filas.append((f"{col}_nulos", int(df[col].isna().sum()), f"Valores nulos en {col}"))

    return pd.DataFrame(filas, columns=["metrica", "valor", "descripcion"])


def inspeccionar_dataset(path: str, vacunaciones: bool = False) -> pd.DataFrame:
    """Inspecciona la estructura de uno de los datasets"""
    print(f"=== INSPECCIONANDO {path} ===")
    leer = read_vaccinations if vacunaciones else read_cases
    df = leer(path, date_format=config.DATE_FORMAT)

    print("\n INFORMACIÓN BÁSICA:")
    print(f"   - Filas: {len(df)}")
    print(f"   - Rango de fechas: {df['date'].min()} to {df['date'].max()}")

    perfil = perfilar_dataset(df)
    print("\n PERFILADO:")
    print(perfil.to_string(index=False))

    print("\n MUESTRA DE DATOS:")
    print(df.head(10))

    return perfil


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Perfilado de los datasets COVID-19")
    parser.add_argument("path", nargs="?", default=config.COVID_DEATHS_SOURCE)
    parser.add_argument("--vacunaciones", action="store_true",
                        help="El archivo es el dataset de vacunaciones")
    parser.add_argument("--salida", help="Guardar la tabla de perfilado como CSV")
    args = parser.parse_args(argv)

    perfil = inspeccionar_dataset(args.path, vacunaciones=args.vacunaciones)
    if args.salida:
        perfil.to_csv(args.salida, index=False)
        print(f" Tabla de perfilado guardada como '{args.salida}'")


if __name__ == "__main__":
    main()
