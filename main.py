"""Punto de entrada: partida de tres en raya por terminal.

La API HTTP se sirve con: uvicorn gridgame.api.app:app
"""

from dotenv import load_dotenv

from gridgame.cli import run_terminal

# Cargar variables de entorno
load_dotenv()


def main():
    """Función principal."""
    run_terminal()


if __name__ == "__main__":
    main()
