"""
quizclient — UI-free core of the EduQuiz Streamlit client.

Pages under ``frontend/pages`` import from here; nothing in this package
except ``quizclient.ui`` touches Streamlit.
"""

__version__ = "0.1.0"
