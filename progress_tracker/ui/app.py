"""Point d'entrée principal de l'application Streamlit."""

import os
import sys

# Ajouter le répertoire racine au path pour `streamlit run progress_tracker/ui/app.py`
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from progress_tracker.ui.app_main import main

if __name__ == "__main__":
    main()
