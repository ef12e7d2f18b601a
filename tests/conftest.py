"""Shared fixtures for the mibkit test suite."""

import logging
import os
import sys
from collections.abc import Generator

import pytest

# Make `tools` importable the same way the scripts are run from the repo root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mibkit.app_config import AppConfig
from mibkit.app_logger import AppLogger


SAMPLE_MIB = '''\
-- Sample vendor MIB used across the tests
ACME-MIB DEFINITIONS ::= BEGIN

IMPORTS
    MODULE-IDENTITY, OBJECT-TYPE, Integer32, enterprises
        FROM SNMPv2-SMI
    DisplayString
        FROM SNMPv2-TC;

acmeMIB MODULE-IDENTITY
    LAST-UPDATED "202401010000Z"
    ORGANIZATION "Acme Corp"
    CONTACT-INFO
        "Acme Support
         support@acme.example"
    DESCRIPTION
        "The MIB module for Acme widgets."
    REVISION "202401010000Z"
    DESCRIPTION
        "Initial revision."
    ::= { enterprises 55108 }

acmeObjects OBJECT IDENTIFIER ::= { acmeMIB 1 }

acmeName OBJECT-TYPE
    SYNTAX      DisplayString
    MAX-ACCESS  read-only
    STATUS      current
    DESCRIPTION
        "Name of the widget,
         as configured by
         the operator."
    ::= { acmeObjects 1 }

acmeStatus OBJECT-TYPE
    SYNTAX      INTEGER { up(1), down(2), testing(3) }
    MAX-ACCESS  read-write
    STATUS      current
    DESCRIPTION "Operational state."  -- trailing comment
    ::= { acmeObjects 2 }

acmeTemperature OBJECT-TYPE
    SYNTAX      Integer32
    UNITS       "degrees Celsius"
    MAX-ACCESS  read-only
    STATUS      current
    DESCRIPTION "Widget temperature."
    ::= { acmeObjects 10 }

acmeTable OBJECT-TYPE
    SYNTAX      SEQUENCE OF AcmeEntry
    MAX-ACCESS  not-accessible
    STATUS      current
    DESCRIPTION "Port table."
    ::= { acmeObjects 9 }

acmeEntry OBJECT-TYPE
    SYNTAX      AcmeEntry
    MAX-ACCESS  not-accessible
    STATUS      current
    DESCRIPTION "A port row."
    INDEX       { acmePortIndex }
    ::= { acmeTable 1 }

acmePortIndex OBJECT-TYPE
    SYNTAX      Integer32 (1..64)
    MAX-ACCESS  read-only
    STATUS      current
    DESCRIPTION "Port number."
    ::= { acmeEntry 1 }

END
'''

MINIMAL_MIB = '''\
TEST-MIB DEFINITIONS ::= BEGIN
testObj OBJECT IDENTIFIER ::= { mib-2 99 }
END
'''


@pytest.fixture
def sample_mib() -> str:
    return SAMPLE_MIB


@pytest.fixture
def minimal_mib() -> str:
    return MINIMAL_MIB


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Each test starts with no AppConfig instance and no installed log handlers."""
    AppConfig.reset()
    yield
    AppConfig.reset()
    AppLogger.reset()
    logging.getLogger().setLevel(logging.WARNING)
