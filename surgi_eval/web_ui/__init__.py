"""
SurgiEval — Web UI Module

Streamlit веб-інтерфейс станції ОСКІ.

Запуск:
    streamlit run surgi_eval/web_ui/app.py

    або:

    python scripts/run_web.py

Екрани (по етапах сесії):
    - Вхід студента
    - Вибір типу станції та теми
    - Попередній перегляд сценарію (лише для викладача)
    - Станція: таймер, чек-лист, нотатки
    - Результати: оцінка, обґрунтування, PDF звіт

Вимоги:
    - Streamlit >= 1.37.0 (st.fragment)
    - GEMINI_API_KEY в environment
"""
