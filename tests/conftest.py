"""Shared fixtures: sample résumé sources and a quiet event log."""

import pytest

from quill.contexts.rendering.geometry import load_layout
from quill.utils import event_logging

SAMPLE_RESUME = r"""
\documentclass[letterpaper,11pt]{article}
\usepackage{titlesec}
% Macro definitions are never part of the body
\newcommand{\resumeItem}[1]{\item\small{{#1 \vspace{-2pt}}}}
\newcommand{\resumeSubheading}[4]{\item #1 #2 #3 #4}

\begin{document}

\begin{center}
    \textbf{\Huge \scshape Jo Park} \\ \vspace{1pt}
    \small 555-0100 $|$ \href{mailto:jo@x.dev}{\underline{jo@x.dev}} $|$
    \href{https://github.com/jopark}{\underline{github.com/jopark}}
\end{center}

%-----------EDUCATION-----------
\section{Education}
  \resumeSubHeadingListStart
    \resumeSubheading
      {Northeastern University}{Boston, MA}
      {Bachelor of Science in Computer Science}{Sep 2014 -- May 2018}
  \resumeSubHeadingListEnd

%-----------EXPERIENCE-----------
\section{Experience}
  \resumeSubHeadingListStart
    \resumeSubheading
      {Backend Engineer}{Jun 2020 -- Present}
      {Acme Corp}{Remote}
      \resumeItemListStart
        \resumeItem{Cut p99 latency by 40\% with \textbf{Redis} caching}
        \resumeItem{Led migration of 12 services to Kubernetes}
      \resumeItemListEnd
  \resumeSubHeadingListEnd

%-----------PROJECTS-----------
\section{Projects}
    \resumeSubHeadingListStart
      \resumeProjectHeading
          {\textbf{Quill} $|$ \emph{Python, ReportLab}}{2023}
          \resumeItemListStart
            \resumeItem{Renders markup to paginated PDF}
          \resumeItemListEnd
    \resumeSubHeadingListEnd

%-----------SKILLS-----------
\section{Technical Skills}
 \begin{itemize}[leftmargin=0.15in, label={}]
    \small{\item{
     \textbf{Languages}{: Python, Go, SQL} \\
     \textbf{Tools}{: Docker, Git}
    }}
 \end{itemize}

\end{document}
"""

SCENARIO_A_MARKUP = r"""
\begin{document}
\section{Experience}
  \resumeSubheading{Engineer}{2020--2022}{Acme}{Remote}
  \resumeItemListStart
    \resumeItem{Led X}
    \resumeItem{Shipped Y}
  \resumeItemListEnd
\end{document}
"""

SAMPLE_PLAIN = """Jo Park is a backend engineer who likes boring technology.

EXPERIENCE
Backend Engineer, Acme Corp (2020 - Present)
**Cut p99 latency by 40%** with Redis caching

## Education
B.S. Computer Science, Northeastern University

Skills:
Python, Go, SQL
"""


@pytest.fixture(autouse=True)
def no_event_file(monkeypatch):
    """Keep tests from appending to a PIPELINE_EVENTS_FILE set in the environment."""
    monkeypatch.setattr(event_logging, "PIPELINE_EVENTS_FILE", None)


@pytest.fixture
def sample_resume():
    return SAMPLE_RESUME


@pytest.fixture
def scenario_a_markup():
    return SCENARIO_A_MARKUP


@pytest.fixture
def sample_plain():
    return SAMPLE_PLAIN


@pytest.fixture
def a4_layout():
    """(PageGeometry, Typography) from the packaged layout on A4."""
    return load_layout(page_size="A4")
