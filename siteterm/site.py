#!/usr/bin/env python3
"""
Fixed site data shown by the terminal.

Everything here is static text owned by the site author: the biography
blocks, the contact card, the virtual files ``cat`` can read, the theme
names and the top-level sections of the virtual tree. A SiteProfile bundles
it so another site can swap its own copy in without touching the commands.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Section:
    """A top-level directory of the virtual tree."""
    name: str
    description: str
    entries: Tuple[str, ...] = ()


WELCOME = """\
Welcome to Void-Strike's Terminal
Type 'help' for available commands"""

ABOUT = """\
About Void-Strike:
  I am a cybersecurity enthusiast and researcher with a passion for
  discovering vulnerabilities and developing security tools.

  My focus areas include:
  - Web Security & Penetration Testing
  - Network Security & Analysis
  - Malware Analysis & Reverse Engineering
  - CTF Challenges & Security Research

  Type 'skills' to see my technical expertise
  Type 'projects' to view my work
  Type 'notes' to access security writeups"""

CONTACT = """\
Contact Information:
  GitHub   - github.com/v0id-strike
  Telegram - t.me/v0id_strike
  Email    - [redacted]"""

SKILLS = """\
Technical Skills:
  Languages:
    - Python, JavaScript, C/C++, Assembly
    - HTML/CSS, SQL, Shell Scripting

  Security Tools:
    - Burp Suite, Wireshark, IDA Pro
    - Metasploit, Nmap, Ghidra
    - Custom Exploitation Tools

  Areas of Expertise:
    - Web Application Security
    - Network Protocol Analysis
    - Malware Analysis
    - Reverse Engineering
    - Exploit Development"""

PROJECTS = """\
Current Projects:
  1. Web Security Scanner
     - Automated vulnerability detection
     - Custom rule engine
     - Report generation

  2. Malware Analysis Framework
     - Dynamic analysis
     - Behavior monitoring
     - IOC extraction

  3. CTF Platform
     - Challenge development
     - Infrastructure management
     - Score tracking"""

WHOAMI = """\
User: void-strike
Role: Security Researcher
Location: [redacted]
Status: Active"""

BIO = """\
Name: Void-Strike
Role: Cybersecurity Researcher
Experience: 5+ years in security research
Focus: Web Security, Malware Analysis, CTF"""

EXPERIENCE = """\
- Senior Security Researcher
- CTF Player and Organizer
- Bug Bounty Hunter
- Security Tool Developer"""


def _default_files() -> Mapping[str, str]:
    return MappingProxyType({'bio.txt': BIO, 'experience.txt': EXPERIENCE})


def _default_sections() -> Tuple[Section, ...]:
    return (
        Section('notes', 'Security notes and writeups'),
        Section('projects', 'My projects',
                ('web-security', 'malware-analysis', 'ctf-writeups')),
        Section('about', 'About me', ('bio.txt', 'experience.txt')),
    )


@dataclass(frozen=True)
class SiteProfile:
    """Static text and layout of one site's terminal."""
    user: str = 'void-strike'
    hostname: str = 'terminal'
    welcome: str = WELCOME
    about: str = ABOUT
    contact: str = CONTACT
    skills: str = SKILLS
    projects: str = PROJECTS
    whoami: str = WHOAMI
    files: Mapping[str, str] = field(default_factory=_default_files, hash=False)
    themes: Tuple[str, ...] = ('dark', 'light', 'matrix', 'neon')
    sections: Tuple[Section, ...] = field(default_factory=_default_sections)
    category_section: str = 'notes'

    def __post_init__(self):
        if not isinstance(self.files, MappingProxyType):
            object.__setattr__(self, 'files', MappingProxyType(dict(self.files)))

    def section(self, name: str) -> Optional[Section]:
        for section in self.sections:
            if section.name == name:
                return section
        return None

    def section_names(self) -> List[str]:
        return [section.name for section in self.sections]


# Short-form texts of the eight-command terminal
CLASSIC_ABOUT = """\
About Void-Strike:
  I am a cybersecurity enthusiast and researcher.
  My focus areas include:
  - Web Security
  - Network Security
  - Malware Analysis
  - CTF Challenges"""

CLASSIC_CONTACT = """\
Contact Information:
  GitHub   - github.com/v0id-strike
  Telegram - t.me/v0id_strike"""


def classic_profile() -> SiteProfile:
    """Profile matching the compact eight-command terminal."""
    return SiteProfile(about=CLASSIC_ABOUT, contact=CLASSIC_CONTACT)
