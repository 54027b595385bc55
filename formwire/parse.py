# -*- coding: utf-8; -*-

"""Parser combinators running on the Earley algorithm.

The header grammars in :mod:`formwire.syntax` are written with these
combinators, staying as close as possible to the ABNF in the RFCs.
Earley accepts any context-free grammar, so alternatives can overlap and
rules can be written the way the RFCs write them, without lookaheads
or left-factoring.

Terminal symbols are single octets. Input text is encoded to ISO-8859-1
before parsing, and every parsed octet is decoded back from ISO-8859-1,
so the results are always Unicode strings. Semantic actions (attached with
the ``<<`` operator, :meth:`Symbol.__rlshift__`) then turn those strings
into more useful objects, such as :class:`formwire.structure.ContentType`.

By default, :func:`parse` requires the whole input to match. Header values
seen in the wild often carry junk at the end, so :func:`parse` can also
take the longest prefix of the input that matches and ignore the rest
(``to_eof=False``).

A grammar is built once, at import time, and is never changed afterwards.
Parsing keeps all of its state in local variables, so any number of threads
can share the same grammar.
"""

import operator

from bitstring import BitArray, Bits

from formwire.util.text import format_chars, nicely_join


###############################################################################
# The main interface to parsing.

def parse(data, symbol, to_eof=True):
    """(Try to) parse a string as a grammar symbol.

    :param data:
        The bytestring or Unicode string to parse. Unicode will be encoded
        to ISO-8859-1 first; encoding failure is treated as a parse failure.
    :param symbol:
        The :class:`Symbol` to parse as.
    :param to_eof:
        If `True`, `symbol` must match the entire `data`. Otherwise,
        the longest prefix of `data` that matches `symbol` is parsed,
        and the rest of `data` is ignored.
    :return:
        The result of parsing.
    :raises:
        :exc:`ParseError` if `data` (or, with ``to_eof=False``, any prefix
        of it) does not match `symbol`.
    """
    if not isinstance(data, bytes):
        try:
            data = data.encode('iso-8859-1')
        except UnicodeError as e:
            raise ParseError(position=e.start, expected=[], found=None)
    return _inner_parse(data, symbol.as_nonterminal(), to_eof)


class ParseError(Exception):

    def __init__(self, position, expected, found=None):
        """
        :param position: Byte offset at which the error was encountered.
        :param expected:
            List of ``(description, symbols)``, where `description` is
            a free-form description of what could satisfy parse at that
            `position` in the input, and `symbols` is an iterable
            of :class:`Symbol` as part of which this `description` would be
            expected. `symbols` may be `None` if the input could just as well
            have ended at that `position`.
        :param found:
            A bytestring of length 1 or 0 (for EOF) that was found
            at `position`, or `None` if the input could not be encoded
            to ISO-8859-1 in the first place.
        """
        super(ParseError, self).__init__(
            u'unexpected input at byte position %r' % position)
        self.position = position
        self.expected = expected
        self.found = found

    def explain(self):
        """Describe this error in a single line of English."""
        if self.found is None:
            found = u'a character outside ISO-8859-1'
        elif self.found:
            found = format_chars([self.found])
        else:
            found = u'end of data'
        alternatives = []
        for (description, symbols) in self.expected:
            names = sorted(set(
                u'%s (%s)' % (sym.name, sym.citation) if sym.citation
                else u'%s' % sym.name
                for sym in symbols or []))
            if names:
                description += u' as part of ' + nicely_join(names)
            alternatives.append(description)
        explanation = u'%s: found %s' % (self, found)
        if alternatives:
            explanation += u'; expected ' + u', or '.join(alternatives)
        return explanation


###############################################################################
# Combinators to construct a grammar suitable for the Earley algorithm.


class Symbol(object):

    """A symbol of the grammar (either terminal or nonterminal)."""

    def __init__(self, name=None, citation=None, is_pivot=False,
                 is_ephemeral=None):
        """
        :param name:
            The name of this symbol in the grammar, normally as specified
            in `citation`.
        :param citation:
            The :class:`~formwire.citation.Citation` for the document that
            defines this symbol.
        :param is_pivot:
            `True` if this symbol is a meaningful enough block of the grammar
            to be named in a :exc:`ParseError` explanation.
        :param is_ephemeral:
            Whether this symbol is ephemeral. If `None`, this is determined
            heuristically. See :meth:`is_ephemeral`.
        """
        self.name = name
        self.citation = citation
        self.is_pivot = is_pivot
        self._is_ephemeral = is_ephemeral

    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__,
                            self.name or hex(id(self)))

    def __gt__(self, seal):
        """``sym >seal`` seals the `sym` symbol, then applies `seal` to it.

        A sealed symbol is treated as a unit with its own name and citation,
        and is never inlined into the rules of other symbols. This keeps
        the `Symbol` objects laid out like the grammar in the RFCs,
        which is what error explanations refer to.

        See also :func:`fill_names`.
        """
        if self.name is None:
            sealed = self
        else:
            sealed = SimpleNonterminal(rules=[Rule((self,))])
        (sealed.name, sealed.citation, sealed.is_pivot) = seal
        return sealed

    @property
    def is_ephemeral(self):
        """Is it OK to inline this symbol into others (if possible)?

        Ephemeral symbols are intermediate results of combining symbols.
        In::

            foo = bar | baz | qux           > auto

        Python evaluates ``(bar | baz) | qux``, and the ``bar | baz``
        in the middle must dissolve into `foo`, leaving it with three rules.
        """
        if self._is_ephemeral is None:
            return (self.name is None)
        else:
            return self._is_ephemeral

    def group(self):
        raise NotImplementedError

    def is_nullable(self):
        raise NotImplementedError

    def as_rule(self):
        raise NotImplementedError

    def as_rules(self):
        raise NotImplementedError

    def as_nonterminal(self):
        raise NotImplementedError

    def __or__(self, other):
        other = as_symbol(other)
        return SimpleNonterminal(rules=self.as_rules() + other.as_rules())

    def __ror__(self, other):
        other = as_symbol(other)
        return SimpleNonterminal(rules=other.as_rules() + self.as_rules())

    def __mul__(self, other):
        other = as_symbol(other)
        return SimpleNonterminal(
            rules=[self.as_rule().concat(other.as_rule())])

    def __rmul__(self, other):
        other = as_symbol(other)
        return SimpleNonterminal(
            rules=[other.as_rule().concat(self.as_rule())])

    def __rlshift__(self, func):
        """``func << sym`` wraps the result of parsing `sym` with `func`."""
        if isinstance(func, type) and func not in (int, str):
            # Results wrapped in a class are meaningful units
            # (a media type, a whole header value),
            # so keep them from being inlined into other symbols.
            is_ephemeral = False
        else:
            is_ephemeral = None
        return SimpleNonterminal(
            rules=[rule.wrap(func) for rule in self.as_rules()],
            is_ephemeral=is_ephemeral)

    def __add__(self, other):
        return operator.add << self * other

    def __radd__(self, other):
        return operator.add << other * self


class Terminal(Symbol):

    """A terminal symbol of the grammar, matching some set of octets."""

    def __init__(self, name=None, citation=None, bits=None):
        super(Terminal, self).__init__(name, citation)
        self.bits = bits if bits is not None else Bits(bytes(32))

    def chars(self):
        return [bytes((i,)) for (i, v) in enumerate(self.bits) if v]

    def match(self, char):
        return self.bits[ord(char)]

    def group(self):
        return self

    def as_rule(self):
        return Rule((self,))

    def as_rules(self):
        return [self.as_rule()]

    def as_nonterminal(self):
        return SimpleNonterminal(rules=self.as_rules())

    def __or__(self, other):
        other = as_symbol(other)
        if isinstance(other, Terminal):
            return Terminal(bits=self.bits | other.bits)
        else:
            return super(Terminal, self).__or__(other)

    def __sub__(self, other):
        other = as_symbol(other)
        return Terminal(bits=self.bits ^ (self.bits & other.bits))

    def is_nullable(self):
        return False


class Nonterminal(Symbol):

    """A nonterminal symbol of the grammar.

    Every nonterminal has a list of rules (:class:`Rule` objects)
    according to which it can be parsed.
    The list, and whether the nonterminal can match the empty string,
    are fixed when it is created.
    """

    def __init__(self, name=None, citation=None, is_pivot=False,
                 is_ephemeral=None):
        super(Nonterminal, self).__init__(name, citation, is_pivot,
                                          is_ephemeral)
        self._is_nullable = None

    @property
    def rules(self):
        raise NotImplementedError

    def as_rule(self):
        if self.is_ephemeral and len(self.rules) == 1:
            return self.rules[0]
        else:
            return Rule((self,))

    def as_rules(self):
        if self.is_ephemeral:
            return self.rules
        else:
            return [self.as_rule()]

    def as_nonterminal(self):
        return self

    def is_nullable(self):
        return self._is_nullable


class SimpleNonterminal(Nonterminal):

    def __init__(self, name=None, citation=None, is_pivot=False,
                 is_ephemeral=None, rules=None):
        super(SimpleNonterminal, self).__init__(name, citation, is_pivot,
                                                is_ephemeral)
        self._rules = rules or []
        self._is_nullable = any(all(sym.is_nullable() for sym in rule.symbols)
                                for rule in self._rules)

    @property
    def rules(self):
        return self._rules

    def group(self):
        if self.is_ephemeral:
            return SimpleNonterminal(rules=self.rules, is_ephemeral=False)
        else:
            return self


class RepeatedNonterminal(Nonterminal):

    """Zero or more repetitions of `inner`."""

    def __init__(self, name=None, citation=None, inner=None):
        super(RepeatedNonterminal, self).__init__(name, citation,
                                                  is_pivot=False,
                                                  is_ephemeral=False)
        self.inner = inner
        self._is_nullable = True
        # Left recursion without a semantic action:
        # :func:`_find_results` unrolls this form into a loop.
        self._rules = (subst([]) << empty | self * group(inner)).rules

    def group(self):    # pragma: no cover
        return self

    @property
    def rules(self):
        return self._rules


class Rule(object):

    """A rule according to which a nonterminal can be parsed.

    Consists of a tuple of symbols (terminals or nonterminals)
    + a semantic action that will be applied to the tuple of results
    to produce this rule's final result.
    """

    def __init__(self, symbols, action=None):
        self.symbols = symbols
        self.action = action

        # The trailing `None` marks a completed item,
        # so the parser never needs a bounds check.
        self.xsymbols = self.symbols + (None,)

    def __repr__(self):
        return '<Rule %r>' % (self.symbols,)

    def concat(self, other):
        if self.action is None and other.action is None:
            concat_action = None
        else:
            len1 = len(self.symbols)
            action1 = self.action
            action2 = other.action
            def concat_action(nodes):
                nodes1 = nodes[:len1]
                if action1 is not None:
                    nodes1 = action1(nodes1)
                nodes2 = nodes[len1:]
                if action2 is not None:
                    nodes2 = action2(nodes2)
                return nodes1 + nodes2
        return Rule(self.symbols + other.symbols, concat_action)

    def wrap(self, func):
        inner_action = self.action
        def wrapper_action(nodes):
            if inner_action is not None:
                nodes = inner_action(nodes)
            r = func(*(node for node in nodes if node is not _SKIP))
            if r is _SKIP:
                return ()
            else:
                return (r,)
        return Rule(self.symbols, wrapper_action)


class _Skip(object):

    def __repr__(self):
        return '_SKIP'

_SKIP = _Skip()


empty = SimpleNonterminal(name=u'empty', rules=[Rule(())], is_ephemeral=True)


def octet_range(min_, max_):
    """Create a terminal that accepts bytes from `min_` to `max_` inclusive."""
    bits = BitArray(bytes(32))
    for i in range(min_, max_ + 1):
        bits[i] = True
    return Terminal(bits=Bits(bits))

def octet(value):
    """Create a terminal that accepts only the `value` byte."""
    return octet_range(value, value)

def literal(s, case_sensitive=False):
    """Create a symbol that parses the `s` string."""
    if len(s) == 1:
        if case_sensitive:
            return octet(ord(s))
        else:
            return octet(ord(s.lower())) | octet(ord(s.upper()))
    else:
        r = empty
        for c in s:
            r = r * literal(c, case_sensitive)
        return _join_args << r

def as_symbol(x):
    return x if isinstance(x, Symbol) else literal(x)


def skip(x):
    return _skip_args << as_symbol(x)

def group(x):
    return as_symbol(x).group()


def many(inner):
    return RepeatedNonterminal(inner=as_symbol(inner))

def string(inner):
    return u''.join << many(inner)

def many1(inner):
    inner = as_symbol(inner)
    return (_as_list << group(inner)) + many(inner)

def string1(inner):
    return u''.join << many1(inner)


def string_excluding(terminal, excluding):
    """
    ``string_excluding(t, ['foo', 'bar'])`` is the same as ``string(t)``,
    except it **never parses** the input strings "foo" and "bar"
    (case-insensitive).

    This is how a generic rule steps aside for the strings that the grammar
    special-cases. In ``Content-Disposition``, a parameter named ``filename``
    matches both the generic parameter name (a ``token``) and the special
    rule that normalizes it. Excluding ``filename`` from the generic
    ``token`` leaves exactly one way to parse it.

    This only works when the excluded strings are relatively few and short.
    """
    initials = set(s[0:1].lower() for s in excluding if s)

    free = terminal
    for c in initials:
        free = free - literal(c)

    r = free + string(terminal)
    for c in initials:
        continuations = [s[1:] for s in excluding if s[0:1].lower() == c]
        r = r | literal(c) + string_excluding(terminal, continuations)
    if '' not in excluding:
        r = r | subst(u'') << empty
    return r


class _AutoName(object):

    def __repr__(self):
        return '_AUTO'

_AUTO = _AutoName()


def named(name, citation=None, is_pivot=False):
    return (name, citation, is_pivot)

auto = named(_AUTO)
pivot = named(_AUTO, is_pivot=True)

def fill_names(scope, citation):
    """Process automatic names for all symbols in `scope`.

    After::

      foobar = literal('foo') | literal('bar')      > auto

    the symbol has no way of knowing that it is called ``foobar``.
    This function takes the names from `scope` (normally ``globals()``
    of a grammar module) and writes them back into the symbols
    sealed with :data:`auto` or :data:`pivot`.
    """
    for name, x in scope.items():
        if isinstance(x, Symbol) and x.name is _AUTO:
            x.name = name.rstrip('_').replace('_', '-')
            x.citation = citation


###############################################################################
# Functions that are useful as semantic actions in parsing rules.

def _skip_args(*_):
    return _SKIP

def _join_args(*args):
    return u''.join(args)

def subst(r):
    def substitute(*_):
        return r
    return substitute

def _as_list(*args):
    return list(args)


###############################################################################
# The Earley algorithm itself.
# Speed matters more than elegance here, so the code is low-level
# and leans on comments instead.


def _add_item(items, items_idx, items_set, symbol, rule, pos, start):
    # One position of the chart is kept as three structures:
    # `items` lists the Earley items in the order they were added,
    # `items_idx` groups them by the symbol they expect next
    # (`None` for completed items),
    # and `items_set` holds cheap fingerprints to reject duplicates.
    fingerprint = (id(symbol), id(rule), pos, start)

    if fingerprint not in items_set:
        items_set.add(fingerprint)
        items.append((symbol, rule, pos, start))
        items_idx.setdefault(rule.xsymbols[pos], []).append(
            (symbol, rule, pos, start))


def _inner_parse(data, target_symbol, to_eof):
    length = len(data)
    (items, items_idx, items_set) = ([], {}, set())

    chart = [(items, items_idx, items_set)]
    for rule in target_symbol.rules:
        _add_item(items, items_idx, items_set, target_symbol, rule, 0, 0)

    for i in range(length + 1):
        token = data[i : i + 1]

        # Successful scans at `i` go to the next position.
        chart.append(([], {}, set()))

        (items, items_idx, items_set) = chart[i]
        if len(items) == 0:
            # Nothing was scanned into this position, so nothing can follow.
            break

        j = 0
        while True:
            (symbol, rule, pos, start) = items[j]
            next_symbol = rule.xsymbols[pos]

            if next_symbol is None:
                # Completion: every item at `start` that was waiting
                # for `symbol` moves past it.
                (_, items_idx1, _) = chart[start]
                candidates = items_idx1.get(symbol, [])
                for (symbol1, rule1, pos1, start1) in candidates:
                    _add_item(items, items_idx, items_set,
                              symbol1, rule1, pos1 + 1, start1)

            elif isinstance(next_symbol, Nonterminal):
                # A nullable symbol may also be stepped over right away,
                # see http://loup-vaillant.fr/tutorials/earley-parsing/empty-rules
                if next_symbol.is_nullable():
                    _add_item(items, items_idx, items_set,
                              symbol, rule, pos + 1, start)
                # Prediction: start every rule of `next_symbol` here.
                for next_rule in next_symbol.rules:
                    _add_item(items, items_idx, items_set,
                              next_symbol, next_rule, 0, i)

            else:
                # Scan: a terminal that matches the current octet
                # moves the item to the next position.
                if token and next_symbol.match(token):
                    (items1, items_idx1, items_set1) = chart[i + 1]
                    _add_item(items1, items_idx1, items_set1,
                              symbol, rule, pos + 1, start)

            j += 1
            if j == len(items):
                break

    # pylint: disable=undefined-loop-variable
    if to_eof:
        ends = [i] if i == length else []
    else:
        ends = range(i, -1, -1)

    for end in ends:
        # An ambiguous grammar may have several parses ending here.
        # We take the first one that covers the input from the beginning.
        for start_i, _, result in _find_results(data, target_symbol,
                                                chart, end, []):
            if start_i == 0:
                return result

    raise _build_parse_error(data, target_symbol, chart)


def _find_results(data, symbol, chart, end_i, outer_parents):
    # A terminal can only produce the single octet just before `end_i`.
    if isinstance(symbol, Terminal):
        if end_i > 0:
            token = data[end_i - 1 : end_i]
            if symbol.match(token):
                yield end_i - 1, None, token.decode('iso-8859-1')
        return

    (_, items_idx, _) = chart[end_i]
    for item in items_idx.get(None, []):
        (sym, rule, _, start_i) = item
        if sym is not symbol:
            continue

        # An item already being expanded further up the stack
        # would send us into unbounded recursion.
        if item in outer_parents:
            continue

        # Collect results for the rule's symbols right to left,
        # so that each one ends where the next one starts.
        # Recursion would run out of stack on long inputs,
        # so the backtracking runs on an explicit stack of frames,
        # one frame per position in the rule.
        frames = [(end_i, outer_parents + [item], None, None)]

        # The left-recursive rule of `many` gets one frame per repetition
        # instead of one per symbol, so long repetitions don't nest.
        if isinstance(symbol, RepeatedNonterminal) and \
                rule.xsymbols[0] is symbol:
            n_nodes = None
            inner_symbol = rule.symbols[-1]
        else:
            n_nodes = len(rule.symbols)

        while True:
            (i, parents, rs, node) = frames.pop()
            if len(frames) == n_nodes:
                # Every symbol of the rule has a result.
                # They only form a parse if they reach back to `start_i`.
                if i != start_i:
                    continue

                nodes = tuple(n for (_, _, _, n) in reversed(frames))
                if rule.action is not None:
                    nodes = rule.action(nodes)
                nodes = tuple(n for n in nodes if n is not _SKIP)
                if len(nodes) == 0:
                    result = _SKIP
                elif len(nodes) == 1:
                    result = nodes[0]
                else:
                    result = nodes

                yield start_i, item, result

                if len(frames) == 0:
                    break

            else:
                if rs is None:
                    if n_nodes is not None:
                        inner_symbol = rule.symbols[-len(frames) - 1]
                    rs = _find_results(data, inner_symbol, chart, i, parents)

                r = next(rs, None)
                if r is None:
                    # This symbol has no more results here;
                    # backtrack to the symbol on its right.
                    if len(frames) > 0:
                        continue
                    else:
                        break

                new_i, new_item, new_node = r

                if new_i < i:
                    # Input was consumed, so recursion is bounded again.
                    new_parents = []
                elif n_nodes is None:
                    # A repetition that consumed nothing must not be
                    # tried again at the same position.
                    new_parents = parents + [new_item]
                else:
                    # Nothing consumed, but the rule has only `n_nodes`
                    # positions to go through.
                    new_parents = parents

                if n_nodes is None and new_i == start_i:
                    # All repetitions of `many` are accounted for.
                    nodes = [new_node]
                    for (_, _, _, n) in reversed(frames):
                        nodes.append(n)
                    yield new_i, item, nodes

                if new_i >= start_i:
                    # Keep the iterator to come back to it for other results,
                    # then look for the symbol on the left, ending at `new_i`.
                    frames.append((i, parents, rs, new_node))
                    frames.append((new_i, new_parents, None, None))
                else:
                    # Too far to the left; try the next result instead.
                    frames.append((i, parents, rs, node))


def _build_parse_error(data, target_symbol, chart):
    # The last position that still has Earley items
    # is as far as the input made sense.
    i, items = [(i, items)
                for (i, (items, _, _)) in enumerate(chart)
                if len(items) > 0][-1]
    found = data[i : i + 1]

    expected = {}
    for (symbol, rule, pos, start) in items:
        next_symbol = rule.xsymbols[pos]
        if isinstance(next_symbol, Terminal):
            chars = format_chars(next_symbol.chars())
            expected.setdefault(chars, set()).update(
                _find_pivots(chart, symbol, start))

        if symbol is target_symbol and next_symbol is None:
            # The target is complete here, so the data could have ended.
            expected[u'end of data'] = None

    return ParseError(position=i, expected=list(expected.items()),
                      found=found)


def _find_pivots(chart, symbol, start, stack=None):
    if symbol.is_pivot:
        yield symbol
    else:
        stack = (stack or []) + [(symbol, start)]
        (_, items_idx, _) = chart[start]
        parents = items_idx.get(symbol, [])
        for (parent, _, _, parent_start) in parents:
            if (parent, parent_start) not in stack:
                for p in _find_pivots(chart, parent, parent_start, stack):
                    yield p
