"""Shared constants for tests."""

AFRICA_UUID = "adb4f804-c3b6-3eca-8708-5edeec653a27"
AFRICA_TME_ID = "TnN0ZWluX0dMX0FGVE1fR0xfMTY0ODM1-U2VjdGlvbnM="
