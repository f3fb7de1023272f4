"""The built-in validation rules.

This package contains all the individual rule implementations that are
discovered and registered by `pyvalq.core.registry.RuleRegistry`. Each
module in this package should contain one or more classes that inherit
from `pyvalq.core.base_rule.BaseRule`. The `builders` module holds objects
that serialize to rule tokens.
"""
from .builders import In, NotIn, RequiredIf
from .comparison import ConfirmedRule, DifferentRule, SameRule
from .database import ExistsRule, UniqueRule
from .dates import AfterRule, BeforeRule
from .files import ImageRule, MimesRule
from .membership import InRule, NotInRule
from .network import ActiveUrlRule, EmailRule, IpRule, UrlRule
from .numeric import IntegerRule, NumericRule
from .patterns import AlphaDashRule, AlphaNumRule, AlphaRule, RegexRule
from .required import AcceptedRule, RequiredRule
from .size_rules import BetweenRule, MaxRule, MinRule, SizeRule
