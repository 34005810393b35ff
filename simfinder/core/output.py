"""
Output formatting for CLI operations.
"""

import csv
import json
import sys
from io import StringIO
from typing import Any, Dict, List, Optional, Sequence, TextIO


class OutputFormatter:
    """
    Format similarity results in various formats.

    Matches and groups are taken as their record dicts (see
    SimilarityMatch.to_record and DuplicateGroup.to_record).
    """

    def __init__(self, format: str = 'text', file: Optional[TextIO] = None):
        """
        Initialize output formatter.

        Args:
            format: Output format ('text', 'json', 'csv')
            file: Output file (default: sys.stdout)
        """
        self.format = format.lower()
        self.file = file or sys.stdout

    def output_results(self, matches: Sequence[Dict[str, Any]],
                       groups: Optional[Sequence[Dict[str, Any]]],
                       stats: Dict[str, Any]) -> str:
        """
        Format a full run result.

        Args:
            matches: Match records in evaluation order
            groups: Group records, or None when grouping was not performed
            stats: Statistics record
        """
        if self.format == 'json':
            return self._results_json(matches, groups, stats)
        elif self.format == 'csv':
            return self._results_csv(matches, groups)
        else:
            return self._results_text(matches, groups, stats)

    def output_summary(self, stats: Dict[str, Any],
                       groups: Optional[Sequence[Dict[str, Any]]] = None) -> str:
        """Format only the statistics (and group count, if grouped)."""
        if self.format == 'json':
            summary = dict(stats)
            if groups is not None:
                summary['totalGroups'] = len(groups)
            return json.dumps(summary, indent=2, ensure_ascii=False)
        return '\n'.join(self._summary_lines(stats, groups))

    def _summary_lines(self, stats: Dict[str, Any],
                       groups: Optional[Sequence[Dict[str, Any]]]) -> List[str]:
        lines = ["Similarity Summary", "=" * 40]
        lines.append(f"Total matches:       {stats['totalMatches']}")
        lines.append(f"Average similarity:  {stats['avgSimilarity']:.4f}")
        if groups is not None:
            lines.append(f"Duplicate groups:    {len(groups)}")
        for algorithm, count in sorted(stats['algorithmCounts'].items()):
            lines.append(f"  won by {algorithm + ':':<13}{count}")
        return lines

    def _results_text(self, matches: Sequence[Dict[str, Any]],
                      groups: Optional[Sequence[Dict[str, Any]]],
                      stats: Dict[str, Any]) -> str:
        """Format results as human-readable text."""
        lines = []
        lines.append(f"Found {len(matches)} similar pairs")
        lines.append("=" * 60)

        for match in matches:
            lines.append(f"\n[{match['item1']}] <-> [{match['item2']}]  "
                         f"{match['similarity']:.4f} ({match['algorithm']})")
            lines.append(f"  {match['text1']}")
            lines.append(f"  {match['text2']}")

        if groups is not None:
            lines.append("")
            lines.append(f"Found {len(groups)} duplicate groups")
            lines.append("=" * 60)
            for group in groups:
                lines.append(f"\n{group['groupId']} ({group['size']} items):")
                lines.append("-" * 40)
                lines.append("  " + ", ".join(group['members']))

        lines.append("")
        lines.extend(self._summary_lines(stats, groups))
        return '\n'.join(lines)

    def _results_json(self, matches: Sequence[Dict[str, Any]],
                      groups: Optional[Sequence[Dict[str, Any]]],
                      stats: Dict[str, Any]) -> str:
        """Format results as JSON."""
        output = {
            'summary': stats,
            'matches': list(matches),
        }
        if groups is not None:
            output['groups'] = list(groups)

        return json.dumps(output, indent=2, ensure_ascii=False)

    def _results_csv(self, matches: Sequence[Dict[str, Any]],
                     groups: Optional[Sequence[Dict[str, Any]]]) -> str:
        """Format matches as CSV, with the group of each pair when grouped."""
        output = StringIO()
        fieldnames = ['item1', 'item2', 'similarity', 'algorithm', 'text1', 'text2']
        if groups is not None:
            fieldnames.insert(0, 'group_id')

        group_of = {}
        for group in groups or []:
            for member in group['members']:
                group_of[member] = group['groupId']

        writer = csv.DictWriter(output, fieldnames=fieldnames)
        writer.writeheader()

        for match in matches:
            row = {name: match[name] for name in fieldnames if name != 'group_id'}
            if groups is not None:
                row['group_id'] = group_of.get(match['item1'], '')
            writer.writerow(row)

        return output.getvalue()

    def write(self, content: str):
        """Write content to output file."""
        print(content, file=self.file)
