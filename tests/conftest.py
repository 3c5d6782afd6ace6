"""Shared fixtures for isoval tests."""

import pytest

VALID_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Document>
  <SvcLvl>
    <Prtry>NURG</Prtry>
  </SvcLvl>
  <CtgyPurp>
    <Cd>SUPP</Cd>
  </CtgyPurp>
</Document>
"""

INVALID_VALUES_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Document>
  <SvcLvl>
    <Prtry>INCORRECT</Prtry>
  </SvcLvl>
  <CtgyPurp>
    <Cd>INVALID</Cd>
  </CtgyPurp>
</Document>
"""

PAYMENT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Document>
  <SvcLvl>
    <Prtry>NURG</Prtry>
  </SvcLvl>
  <CtgyPurp>
    <Cd>SUPP</Cd>
  </CtgyPurp>
  <CdtrAgt>
    <FinInstnId>
      <BIC>BOFAUS3N</BIC>
    </FinInstnId>
  </CdtrAgt>
</Document>
"""

NAMESPACED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Document xmlns="urn:iso:std:iso:20022:tech:xsd:pacs.008.001.08">
  <FIToFICstmrCdtTrf>
    <CdtTrfTxInf>
      <PmtTpInf>
        <SvcLvl>
          <Prtry>NURG</Prtry>
        </SvcLvl>
        <CtgyPurp>
          <Cd>SUPP</Cd>
        </CtgyPurp>
      </PmtTpInf>
    </CdtTrfTxInf>
  </FIToFICstmrCdtTrf>
</Document>
"""

MALFORMED_XML = "<Document><SvcLvl><Prtry>NURG</Prtry></Document>"


@pytest.fixture
def valid_xml():
    """Message satisfying the default rule set."""
    return VALID_XML


@pytest.fixture
def invalid_values_xml():
    """Message with the default structure but wrong values."""
    return INVALID_VALUES_XML


@pytest.fixture
def payment_xml():
    """Message carrying a creditor agent BIC."""
    return PAYMENT_XML


@pytest.fixture
def namespaced_xml():
    """pacs.008 style message in the ISO 20022 default namespace."""
    return NAMESPACED_XML


@pytest.fixture
def malformed_xml():
    """Message that is not well-formed."""
    return MALFORMED_XML
