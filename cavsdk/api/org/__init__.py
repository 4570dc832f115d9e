"""Organization API; version 1 is in the v1 module."""